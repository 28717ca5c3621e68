"""
Shape factory.

    from patterin import shape

    star = shape.circle().radius(30).num_segments(10)
    star.points.every(2).expand(15)
"""

from .contexts.specialized import (
    CircleContext,
    HexagonContext,
    RectContext,
    SquareContext,
    TriangleContext,
)


class ShapeFactory:
    """Entry points for new parametric shapes, each centered on the origin."""

    def circle(self, radius=10.0, segments=None) -> CircleContext:
        return CircleContext(radius, segments)

    def rect(self, width=10.0, height=10.0) -> RectContext:
        return RectContext(width, height)

    def square(self, size=10.0) -> SquareContext:
        return SquareContext(size)

    def hexagon(self, radius=10.0) -> HexagonContext:
        return HexagonContext(radius)

    def triangle(self, radius=10.0) -> TriangleContext:
        return TriangleContext(radius)


shape = ShapeFactory()
