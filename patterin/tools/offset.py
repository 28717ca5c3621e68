"""
This module grows or shrinks polygon outlines by a fixed distance.

Every edge is pushed along its outward normal. Each corner becomes the crossing of its
two pushed edges (a miter). Corners so sharp that the miter would run further than
|distance| * miter_limit from the original corner are cut off with two points (a bevel).
"""

from ..core.defaults import defaults
from ..kernel.channels import get_channel
from ..primitives.shape import Shape
from ..primitives.vector2 import EPSILON


def line_intersection(a1, a2, b1, b2):
    """
    Crossing of the infinite lines a1-a2 and b1-b2, None when they are parallel.
    """
    d1 = a2 - a1
    d2 = b2 - b1
    cross = d1.cross(d2)
    if abs(cross) < EPSILON:
        return None
    t = (b1 - a1).cross(d2) / cross
    return a1 + d1 * t


class OffsetShape:
    def __init__(self, shape=None, offset=0.0, miter_limit=None):
        self._shape = shape
        self._offset = offset
        self._miter_limit = miter_limit
        self._cached_result = None
        self.bevels = 0

    @property
    def offset(self):
        return self._offset

    @offset.setter
    def offset(self, value):
        if self._offset != value:
            self._offset = value
            self._cached_result = None

    @property
    def miter_limit(self):
        if self._miter_limit is None:
            return defaults.miter_limit
        return self._miter_limit

    @miter_limit.setter
    def miter_limit(self, value):
        if self._miter_limit != value:
            self._miter_limit = value
            self._cached_result = None

    @property
    def shape(self):
        return self._shape

    @shape.setter
    def shape(self, value):
        self._shape = value
        self._cached_result = None

    def result(self) -> Shape:
        if self._cached_result is None:
            self._cached_result = self.calculate_offset()
        return self._cached_result

    def _corner(self, vertex, prev_seg, next_seg, points, index):
        distance = self._offset
        prev_shift = prev_seg.normal * distance
        next_shift = next_seg.normal * distance
        prev_start = prev_seg.start.position + prev_shift
        prev_end = prev_seg.end.position + prev_shift
        next_start = next_seg.start.position + next_shift
        next_end = next_seg.end.position + next_shift

        crossing = line_intersection(prev_start, prev_end, next_start, next_end)
        if crossing is None:
            points.append(vertex.position + vertex.normal * distance)
            return
        miter = (crossing - vertex.position).length()
        if miter > abs(distance) * self.miter_limit:
            self.bevels += 1
            channel = get_channel("geometry")
            if channel:
                channel(
                    f"Bevel at vertex {index}: miter {miter:.4g} exceeds {abs(distance) * self.miter_limit:.4g}"
                )
            points.append(prev_end)
            points.append(next_start)
        else:
            points.append(crossing)

    def calculate_offset(self) -> Shape:
        shape = self._shape
        self.bevels = 0
        if shape.open:
            return self._calculate_open()
        vertices = shape.vertices
        segments = shape.segments
        n = len(vertices)
        if n < 3:
            return shape.clone()
        points = []
        for i, vertex in enumerate(vertices):
            self._corner(vertex, segments[i - 1], segments[i], points, i)
        if len(points) < 3:
            return shape.clone()
        result = Shape.from_points(points, shape.winding)
        result.group = shape.group
        result.color = shape.color
        return result

    def _calculate_open(self) -> Shape:
        shape = self._shape
        distance = self._offset
        vertices = shape.vertices
        segments = shape.segments
        if len(vertices) < 2:
            return shape.clone()
        points = [vertices[0].position + segments[0].normal * distance]
        for i in range(1, len(vertices) - 1):
            self._corner(vertices[i], segments[i - 1], segments[i], points, i)
        points.append(vertices[-1].position + segments[-1].normal * distance)
        result = Shape.open_path(points, shape.winding)
        result.group = shape.group
        result.color = shape.color
        return result


def offset_points(shape: Shape, distance: float, miter_limit=None):
    """
    Vertex positions of the offset outline.
    """
    return [v.position for v in offset_shape(shape, distance, miter_limit).vertices]


def offset_shape(shape: Shape, distance: float, miter_limit=None) -> Shape:
    """
    Offset shape outward for a positive distance, inward for a negative one.

    @param shape: source shape, left untouched
    @param distance: offset distance
    @param miter_limit: bevel threshold as a multiple of |distance|
    @return: new Shape with the source winding, a clone when nothing can be built
    """
    return OffsetShape(shape, distance, miter_limit).result()
