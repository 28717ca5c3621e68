from .path_context import PathContext
from .point_context import PointContext
from .selectable import SelectableContext
from .shape_context import LinesContext, PointsContext, ShapeContext, ShapesContext
from .specialized import (
    CircleContext,
    HexagonContext,
    RectContext,
    SquareContext,
    TriangleContext,
)
