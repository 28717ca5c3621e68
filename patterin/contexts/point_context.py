import math

from ..kernel.exceptions import OrphanPointError
from ..primitives.vector2 import Vector2


class PointContext:
    """
    A single free point, optionally remembering the shape it was derived from.
    """

    def __init__(self, position, parent=None):
        self._position = Vector2.of(position)
        self._parent = parent

    def __repr__(self):
        return f"PointContext({self._position.x:g}, {self._position.y:g})"

    @property
    def position(self) -> Vector2:
        return self._position

    @property
    def x(self) -> float:
        return self._position.x

    @property
    def y(self) -> float:
        return self._position.y

    @property
    def parent(self):
        return self._parent

    @property
    def is_orphan(self) -> bool:
        return self._parent is None

    def expand(self, radius, segments=None):
        """
        Circle centered on this point.

        @return: CircleContext, independent of the parent shape
        """
        from .specialized import CircleContext

        return CircleContext(radius, segments, center=self._position)

    def raycast(self, distance, direction) -> "PointContext":
        """
        Point at distance from this one.

        @param distance: ray length
        @param direction: angle in degrees, or 'outward' / 'inward' relative to the
            parent shape
        @return: PointContext without parent
        @raise OrphanPointError: for a relative direction on a point without parent
        """
        if isinstance(direction, str):
            if direction not in ("outward", "inward"):
                raise ValueError(f"Unknown ray direction '{direction}'")
            angle = self._relative_angle(direction)
        else:
            angle = math.radians(direction)
        return PointContext(self._position + Vector2.from_angle(angle) * distance)

    def _relative_angle(self, direction):
        if self._parent is None:
            raise OrphanPointError(
                f"Point {self!r} has no parent shape, '{direction}' needs an explicit angle"
            )
        for vertex in self._parent.vertices:
            if vertex.position.equals(self._position):
                angle = vertex.normal.angle()
                return angle + math.pi if direction == "inward" else angle
        to_center = (self._parent.centroid() - self._position).angle()
        return to_center + math.pi if direction == "outward" else to_center
