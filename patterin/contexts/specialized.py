"""
Parametric shape contexts. Changing a parameter rebuilds the outline of the same Shape
object around the stored center, so earlier transforms of the outline are replaced.
"""

import math

from ..core.defaults import defaults
from ..primitives.shape import Shape
from ..primitives.vector2 import Vector2
from .shape_context import ShapeContext


class _ParametricContext(ShapeContext):
    def _build(self) -> Shape:
        raise NotImplementedError

    def _rebuild(self):
        outline = self._build()
        self._shape.replace_segments(outline.segments, outline.winding)

    def set_center(self, x, y):
        self._center = Vector2(x, y)
        self._rebuild()
        return self


class CircleContext(_ParametricContext):
    def __init__(self, radius=10.0, segments=None, center=None):
        self._radius = radius
        self._segments = max(3, segments or defaults.circle_segments)
        self._center = Vector2.zero() if center is None else Vector2.of(center)
        super().__init__(self._build())

    def _build(self):
        return Shape.regular_polygon(self._segments, self._radius, self._center)

    def radius(self, r):
        self._radius = r
        self._rebuild()
        return self

    def num_segments(self, n):
        """Number of polygon edges approximating the circle, at least 3."""
        self._segments = max(3, n)
        self._rebuild()
        return self


class RectContext(_ParametricContext):
    def __init__(self, width=10.0, height=10.0, center=None):
        self._width = width
        self._height = height
        self._center = Vector2.zero() if center is None else Vector2.of(center)
        super().__init__(self._build())

    @staticmethod
    def create_rect(width, height, center) -> Shape:
        hw = width / 2
        hh = height / 2
        c = Vector2.of(center)
        return Shape.from_points(
            [
                (c.x - hw, c.y - hh),
                (c.x + hw, c.y - hh),
                (c.x + hw, c.y + hh),
                (c.x - hw, c.y + hh),
            ]
        )

    def _build(self):
        return self.create_rect(self._width, self._height, self._center)

    @property
    def w(self):
        return self._width

    @property
    def h(self):
        return self._height

    def width(self, w):
        self._width = w
        self._rebuild()
        return self

    def height(self, h):
        self._height = h
        self._rebuild()
        return self

    def wh(self, w, h):
        self._width = w
        self._height = h
        self._rebuild()
        return self

    def size(self, s):
        return self.wh(s, s)


class SquareContext(RectContext):
    def __init__(self, size=10.0, center=None):
        super().__init__(size, size, center)


class _RegularContext(_ParametricContext):
    sides = 3
    rotation = 0.0

    def __init__(self, radius=10.0, center=None):
        self._radius = radius
        self._center = Vector2.zero() if center is None else Vector2.of(center)
        super().__init__(self._build())

    def _build(self):
        return Shape.regular_polygon(self.sides, self._radius, self._center, self.rotation)

    def radius(self, r):
        self._radius = r
        self._rebuild()
        return self


class HexagonContext(_RegularContext):
    """Regular hexagon with its first vertex at 30 degrees."""

    rotation = math.pi / 6
    sides = 6


class TriangleContext(_RegularContext):
    """Equilateral triangle with one vertex pointing up (toward negative y)."""

    rotation = -math.pi / 2
    sides = 3
