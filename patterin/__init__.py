__version__ = "0.1.0"

from .collectors import DEFAULT_STYLES, PathStyle, SVGCollector
from .contexts import (
    CircleContext,
    HexagonContext,
    LinesContext,
    PathContext,
    PointContext,
    PointsContext,
    RectContext,
    ShapeContext,
    ShapesContext,
    SquareContext,
    TriangleContext,
)
from .core import defaults
from .kernel import OrphanPointError, PatterinError, ShapeConstructionError
from .primitives import BoundingBox, Segment, Shape, ValidationResult, Vector2, Vertex, Winding
from .shapes import shape
