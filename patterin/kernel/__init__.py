from .channels import Channel, SimpleLogger, channel_names
from .channels import get_channel as channel
from .exceptions import OrphanPointError, PatterinError, ShapeConstructionError
from .settings import Settings, get_safe_path
