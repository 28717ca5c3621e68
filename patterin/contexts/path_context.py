from svgelements import Path

from ..collectors.svgcollector import DEFAULT_STYLES
from ..core.defaults import defaults
from ..primitives.shape import Shape
from .shape_context import ShapeContext


class PathContext(ShapeContext):
    """
    Context over a stroked path. The underlying shape is usually open; a list of
    segments is wrapped in a new open shape.
    """

    def __init__(self, shape):
        if not isinstance(shape, Shape):
            shape = Shape(shape, is_open=True)
        super().__init__(shape)

    @classmethod
    def from_points(cls, points) -> "PathContext":
        """
        @param points: at least two points
        @raise ShapeConstructionError: for fewer than two points
        """
        return cls(Shape.open_path(points))

    @property
    def length(self) -> float:
        return self._shape.perimeter()

    def to_path_data(self, offset_x=0.0, offset_y=0.0) -> str:
        """
        Path data following the segments in order. A new subpath starts only where a
        segment does not begin at the previous segment's end.
        """
        segments = self._shape.segments
        if not segments:
            return ""
        path = Path()
        current = None
        for seg in segments:
            start = seg.start.position
            end = seg.end.position
            if current is None or not current.equals(start, defaults.path_epsilon):
                path.move((start.x + offset_x, start.y + offset_y))
            path.line((end.x + offset_x, end.y + offset_y))
            current = end
        return path.d()

    def stamp(self, collector, x=0, y=0, style=None):
        if self._shape.ephemeral:
            return
        collector.add_path(self.to_path_data(x, y), DEFAULT_STYLES["line"].merged(style))
