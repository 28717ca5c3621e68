from .segment import Segment, Winding
from .shape import BoundingBox, Shape, ValidationResult
from .vector2 import Vector2
from .vertex import Vertex
