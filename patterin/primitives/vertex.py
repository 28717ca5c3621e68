from .vector2 import EPSILON, Vector2


class Vertex:
    """
    Mutable point of a shape outline.

    A vertex knows the segment arriving at it (prev_segment) and the segment leaving it
    (next_segment). Its normal is the normalized sum of both segment normals, computed
    lazily and cached. Every position write drops the cached normal here and on both
    adjacent segments.
    """

    def __init__(self, x=0.0, y=0.0):
        self._x = float(x)
        self._y = float(y)
        self._normal = None
        self.prev_segment = None
        self.next_segment = None

    def __repr__(self):
        return f"Vertex({self._x:g}, {self._y:g})"

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value):
        self._x = float(value)
        self._moved()

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value):
        self._y = float(value)
        self._moved()

    @property
    def position(self) -> Vector2:
        return Vector2(self._x, self._y)

    @position.setter
    def position(self, value):
        value = Vector2.of(value)
        self._x = value.x
        self._y = value.y
        self._moved()

    def _moved(self):
        self._normal = None
        if self.prev_segment is not None:
            self.prev_segment.invalidate_normal()
        if self.next_segment is not None:
            self.next_segment.invalidate_normal()

    def invalidate_normal(self):
        self._normal = None

    @property
    def normal(self) -> Vector2:
        if self._normal is None:
            self._normal = self._compute_normal()
        return self._normal

    def _compute_normal(self):
        prev_seg = self.prev_segment
        next_seg = self.next_segment
        if prev_seg is None and next_seg is None:
            return Vector2.zero()
        if prev_seg is not None and next_seg is not None:
            prev_normal = prev_seg.normal
            total = prev_normal + next_seg.normal
            if total.length() < EPSILON:
                # Edges fold back onto each other.
                return prev_normal
            return total.normalize()
        if prev_seg is not None:
            return prev_seg.normal
        return next_seg.normal

    def move_along_normal(self, distance: float):
        self.position = self.position + self.normal * distance

    def clone(self) -> "Vertex":
        """Copy of the position only, without segment links."""
        return Vertex(self._x, self._y)

    def equals(self, other, epsilon=EPSILON) -> bool:
        return self.position.equals(Vector2.of(other), epsilon)

    @staticmethod
    def from_vector(v) -> "Vertex":
        v = Vector2.of(v)
        return Vertex(v.x, v.y)
