from enum import Enum

from .vector2 import EPSILON, Vector2


class Winding(str, Enum):
    CW = "cw"
    CCW = "ccw"

    def __str__(self):
        return self.value

    @property
    def reversed(self) -> "Winding":
        return Winding.CW if self is Winding.CCW else Winding.CCW


class Segment:
    """
    Directed edge from start to end.

    The normal points outward for the segment's winding: counter-clockwise loops use
    the clockwise perpendicular of the direction, clockwise loops the counter-clockwise
    one. Loop neighbours are looked up in the owning shape, an orphan segment has none.
    """

    def __init__(self, start, end, winding=Winding.CCW):
        self.start = start
        self.end = end
        self._winding = Winding(winding)
        self._normal = None
        self._owner = None
        self._index = -1
        start.next_segment = self
        end.prev_segment = self

    def __repr__(self):
        return f"Segment({self.start!r} -> {self.end!r})"

    @property
    def winding(self) -> Winding:
        return self._winding

    @winding.setter
    def winding(self, value):
        value = Winding(value)
        if value is not self._winding:
            self._winding = value
            self.invalidate_normal()

    @property
    def owner(self):
        return self._owner

    @property
    def index(self):
        return self._index

    @property
    def next(self):
        owner = self._owner
        if owner is None:
            return None
        segments = owner._segments
        n = len(segments)
        if owner.open and self._index == n - 1:
            return None
        return segments[(self._index + 1) % n]

    @property
    def prev(self):
        owner = self._owner
        if owner is None:
            return None
        segments = owner._segments
        if owner.open and self._index == 0:
            return None
        return segments[(self._index - 1) % len(segments)]

    @property
    def normal(self) -> Vector2:
        if self._normal is None:
            direction = self.direction()
            if self._winding is Winding.CCW:
                self._normal = direction.perpendicular_cw()
            else:
                self._normal = direction.perpendicular()
        return self._normal

    def invalidate_normal(self):
        self._normal = None
        self.start.invalidate_normal()
        self.end.invalidate_normal()

    def length(self) -> float:
        return self.start.position.distance_to(self.end.position)

    def direction(self) -> Vector2:
        return self.direction_raw().normalize()

    def direction_raw(self) -> Vector2:
        return self.end.position - self.start.position

    def midpoint(self) -> Vector2:
        return self.point_at(0.5)

    def point_at(self, t: float) -> Vector2:
        return self.start.position.lerp(self.end.position, t)

    def is_degenerate(self, epsilon=EPSILON) -> bool:
        return self.length() < epsilon

    def clone(self) -> "Segment":
        """
        Segment over copies of both endpoints. The copy is an orphan.
        """
        return Segment(self.start.clone(), self.end.clone(), self._winding)

    def intersect(self, other: "Segment"):
        """
        Intersection point with another segment.

        @param other: segment to intersect with
        @return: Vector2, or None for parallel segments or a crossing outside either
        """
        p1 = self.start.position
        p3 = other.start.position
        d1 = self.end.position - p1
        d2 = other.end.position - p3
        cross = d1.cross(d2)
        if abs(cross) < EPSILON:
            return None
        d3 = p3 - p1
        t = d3.cross(d2) / cross
        u = d3.cross(d1) / cross
        if 0 <= t <= 1 and 0 <= u <= 1:
            return p1 + d1 * t
        return None

    def intersect_ray(self, origin, direction):
        """
        Intersection of the ray origin + t * direction (t >= 0) with this segment.
        """
        origin = Vector2.of(origin)
        direction = Vector2.of(direction)
        p1 = self.start.position
        d2 = self.end.position - p1
        cross = direction.cross(d2)
        if abs(cross) < EPSILON:
            return None
        d3 = p1 - origin
        t = d3.cross(d2) / cross
        u = d3.cross(direction) / cross
        if t >= 0 and 0 <= u <= 1:
            return origin + direction * t
        return None
