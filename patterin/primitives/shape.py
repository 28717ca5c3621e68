import math
from typing import List, NamedTuple, Optional

import numpy as np
from svgelements import Matrix, Path

from ..core.defaults import defaults
from ..kernel.channels import get_channel
from ..kernel.exceptions import ShapeConstructionError
from .segment import Segment, Winding
from .vector2 import Vector2
from .vertex import Vertex


class BoundingBox(NamedTuple):
    min: Vector2
    max: Vector2
    width: float
    height: float
    center: Vector2

    @staticmethod
    def of_points(points) -> "BoundingBox":
        """
        Bounds of any iterable of objects with x/y. Empty input gives a zero box.
        """
        xs = []
        ys = []
        for p in points:
            xs.append(p.x)
            ys.append(p.y)
        if not xs:
            zero = Vector2.zero()
            return BoundingBox(zero, zero, 0.0, 0.0, zero)
        low = Vector2(min(xs), min(ys))
        high = Vector2(max(xs), max(ys))
        return BoundingBox(
            low, high, high.x - low.x, high.y - low.y, low.lerp(high, 0.5)
        )


class ValidationResult(NamedTuple):
    valid: bool
    errors: List[str]


class Shape:
    """
    Ordered loop of segments sharing one winding.

    Closed shapes need at least three segments with each segment ending where the next
    one starts. Open shapes (paths) have no closing segment.

    Shapes are concrete by default. Ephemeral shapes are construction geometry that
    collectors skip; `trace()` and `mark_ephemeral()` switch between the two states.
    """

    def __init__(self, segments=None, winding=Winding.CCW, is_open=False):
        self._segments = []
        self._winding = Winding(winding)
        self.open = is_open
        self.ephemeral = False
        self.group = None
        self.color = None
        self.replace_segments(list(segments) if segments else [])

    def __repr__(self):
        kind = "open" if self.open else "closed"
        return f"Shape({len(self._segments)} segments, {self._winding}, {kind})"

    def __len__(self):
        return len(self._segments)

    @property
    def segments(self) -> List[Segment]:
        """Copy of the segment list. Use replace_segments to change it."""
        return list(self._segments)

    @property
    def winding(self) -> Winding:
        return self._winding

    @winding.setter
    def winding(self, value):
        self._winding = Winding(value)
        for seg in self._segments:
            seg.winding = self._winding

    @property
    def vertices(self) -> List[Vertex]:
        verts = [seg.start for seg in self._segments]
        if self.open and self._segments:
            verts.append(self._segments[-1].end)
        return verts

    @property
    def closed(self) -> bool:
        if self.open or not self._segments:
            return False
        return self._segments[-1].end.equals(self._segments[0].start)

    def points(self) -> List[Vector2]:
        return [v.position for v in self.vertices]

    def as_array(self) -> np.ndarray:
        """Vertex coordinates as an (N, 2) float array."""
        verts = self.vertices
        if not verts:
            return np.zeros((0, 2), dtype=float)
        return np.array([(v.x, v.y) for v in verts], dtype=float)

    # Topology

    def connect_segments(self):
        """
        Re-establish segment ownership, vertex back-references and winding, then drop
        every cached normal.
        """
        segments = self._segments
        for seg in segments:
            seg.start.prev_segment = None
            seg.end.next_segment = None
        for i, seg in enumerate(segments):
            seg._owner = self
            seg._index = i
            seg.winding = self._winding
            seg.start.next_segment = seg
            seg.end.prev_segment = seg
        for seg in segments:
            seg.invalidate_normal()

    def replace_segments(self, segments, winding=None):
        """
        Swap in a new segment list. Segments that leave the shape become orphans.

        @param segments: new segments in loop order
        @param winding: optional winding for the new loop
        """
        segments = list(segments)
        keep = set(map(id, segments))
        for seg in self._segments:
            if id(seg) not in keep:
                seg._owner = None
                seg._index = -1
        self._segments = segments
        if winding is not None:
            self._winding = Winding(winding)
        self.connect_segments()

    def reverse(self):
        """
        Flip vertex order and winding together. Applying it twice restores the shape.
        """
        if not self._segments:
            return
        verts = [v.clone() for v in reversed(self.vertices)]
        self.replace_segments(
            self._link(verts, closed=not self.open), self._winding.reversed
        )

    def remove_degenerate(self, epsilon=None):
        if epsilon is None:
            epsilon = defaults.epsilon
        kept = [seg for seg in self._segments if not seg.is_degenerate(epsilon)]
        removed = len(self._segments) - len(kept)
        if not removed:
            return
        channel = get_channel("geometry")
        if channel:
            channel(f"Removed {removed} degenerate segment(s) from {self!r}")
        # Reattach the survivors end to start so the outline stays connected.
        following = kept[1:] if self.open else kept[1:] + kept[:1]
        for seg, nxt in zip(kept, following):
            if seg.end is not nxt.start:
                seg.end = nxt.start
        self.replace_segments(kept)

    def validate(self) -> ValidationResult:
        errors = []
        segments = self._segments
        n = len(segments)
        if n == 0:
            return ValidationResult(False, ["Shape has no segments"])
        if not self.open and n < 3:
            errors.append(f"Closed shape has {n} segment(s), at least 3 are required")
        count = n - 1 if self.open else n
        for i in range(count):
            nxt = (i + 1) % n
            if not segments[i].end.equals(segments[nxt].start, 1e-9):
                errors.append(f"Segment {i} end does not match segment {nxt} start")
        for i, seg in enumerate(segments):
            if seg.is_degenerate(defaults.epsilon):
                errors.append(f"Segment {i} is degenerate (zero length)")
        if not self.open:
            area = self.area()
            if abs(area) > defaults.epsilon:
                expected = Winding.CCW if area > 0 else Winding.CW
                if expected is not self._winding:
                    errors.append(
                        f"Winding is {self._winding} but signed area {area:g} implies {expected}"
                    )
        return ValidationResult(not errors, errors)

    # Measures

    def area(self) -> float:
        """Shoelace area, positive for counter-clockwise loops."""
        total = 0.0
        for seg in self._segments:
            total += seg.start.x * seg.end.y - seg.end.x * seg.start.y
        return total / 2.0

    def centroid(self) -> Vector2:
        verts = self.vertices
        if not verts:
            return Vector2.zero()
        area = self.area()
        if self.open or abs(area) < defaults.epsilon:
            return Vector2(
                sum(v.x for v in verts) / len(verts),
                sum(v.y for v in verts) / len(verts),
            )
        cx = 0.0
        cy = 0.0
        for seg in self._segments:
            x0, y0 = seg.start.x, seg.start.y
            x1, y1 = seg.end.x, seg.end.y
            cross = x0 * y1 - x1 * y0
            cx += (x0 + x1) * cross
            cy += (y0 + y1) * cross
        return Vector2(cx / (6.0 * area), cy / (6.0 * area))

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.of_points(self.vertices)

    def perimeter(self) -> float:
        return sum(seg.length() for seg in self._segments)

    def contains_point(self, point, epsilon=None) -> bool:
        """
        Even-odd test with a horizontal ray. A ray grazing a vertex is recast slightly
        above and below and the majority of the three answers is returned.
        """
        if epsilon is None:
            epsilon = defaults.epsilon
        point = Vector2.of(point)
        if self.open or len(self._segments) < 3:
            return False
        jitter = defaults.containment_jitter
        result = self._ray_crossings(point.x, point.y, epsilon)
        if any(abs(v.y - point.y) < jitter for v in self.vertices):
            votes = int(result)
            votes += self._ray_crossings(point.x, point.y + jitter * 10, epsilon)
            votes += self._ray_crossings(point.x, point.y - jitter * 10, epsilon)
            return votes >= 2
        return result

    def _ray_crossings(self, px, py, epsilon) -> bool:
        inside = False
        for seg in self._segments:
            xi, yi = seg.start.x, seg.start.y
            xj, yj = seg.end.x, seg.end.y
            if (yi > py) != (yj > py):
                x_cross = (xj - xi) * (py - yi) / (yj - yi + epsilon) + xi
                if px < x_cross:
                    inside = not inside
        return inside

    # Transforms

    def _center_or_centroid(self, center):
        return self.centroid() if center is None else Vector2.of(center)

    def _invalidate(self):
        for seg in self._segments:
            seg.invalidate_normal()

    def scale(self, factor: float, center=None):
        self.scale_xy(factor, factor, center)

    def scale_xy(self, fx: float, fy: float, center=None):
        c = self._center_or_centroid(center)
        for v in self.vertices:
            v.position = Vector2(c.x + (v.x - c.x) * fx, c.y + (v.y - c.y) * fy)
        if fx * fy < 0:
            # Mirrored, the winding has to follow the area sign.
            self.winding = self._winding.reversed
        self._invalidate()

    def rotate(self, radians: float, center=None):
        c = self._center_or_centroid(center)
        for v in self.vertices:
            v.position = c + (v.position - c).rotate(radians)
        self._invalidate()

    def translate(self, offset):
        offset = Vector2.of(offset)
        for v in self.vertices:
            v.position = v.position + offset
        self._invalidate()

    def move_to(self, position):
        self.translate(Vector2.of(position) - self.centroid())

    def transform(self, matrix: Matrix):
        """
        Apply an svgelements Matrix to every vertex. A mirroring matrix flips the winding
        so it keeps agreeing with the area sign.
        """
        matrix = Matrix(matrix)
        for v in self.vertices:
            p = matrix.point_in_matrix_space((v.x, v.y))
            v.position = Vector2(p.x, p.y)
        if matrix.a * matrix.d - matrix.b * matrix.c < 0:
            self.winding = self._winding.reversed
        self._invalidate()

    # State

    def trace(self):
        self.ephemeral = False

    def mark_ephemeral(self):
        self.ephemeral = True

    # Copies and output

    def clone(self) -> "Shape":
        verts = [v.clone() for v in self.vertices]
        shape = Shape(self._link(verts, closed=not self.open), self._winding, self.open)
        shape.ephemeral = self.ephemeral
        shape.group = self.group
        shape.color = self.color
        return shape

    def to_path_data(self) -> str:
        """SVG path data, closed with Z unless the shape is open."""
        verts = self.vertices
        if not verts:
            return ""
        path = Path()
        path.move((verts[0].x, verts[0].y))
        for v in verts[1:]:
            path.line((v.x, v.y))
        if not self.open:
            path.closed()
        return path.d()

    def offset(self, distance: float, miter_limit=None) -> "Shape":
        """
        New shape grown outward (positive distance) or shrunk inward (negative).
        """
        from ..tools.offset import offset_shape

        return offset_shape(self, distance, miter_limit)

    # Construction

    @staticmethod
    def _link(vertices, closed=True, winding=Winding.CCW):
        count = len(vertices) if closed else len(vertices) - 1
        return [
            Segment(vertices[i], vertices[(i + 1) % len(vertices)], winding)
            for i in range(count)
        ]

    @classmethod
    def from_points(cls, points, winding=None) -> "Shape":
        """
        Closed shape through the given points.

        @param points: at least three Vector2, (x, y) pairs or complex numbers
        @param winding: explicit winding, inferred from the signed area when omitted
        @return: Shape
        """
        points = [Vector2.of(p) for p in points]
        if len(points) < 3:
            raise ShapeConstructionError(
                f"Shape requires at least 3 points, got {len(points)}",
                count=len(points),
                minimum=3,
            )
        if winding is None:
            area = 0.0
            for p, q in zip(points, points[1:] + points[:1]):
                area += p.x * q.y - q.x * p.y
            winding = Winding.CW if area < 0 else Winding.CCW
        verts = [Vertex.from_vector(p) for p in points]
        return cls(cls._link(verts, closed=True), winding)

    @classmethod
    def open_path(cls, points, winding=Winding.CCW) -> "Shape":
        points = [Vector2.of(p) for p in points]
        if len(points) < 2:
            raise ShapeConstructionError(
                f"Path requires at least 2 points, got {len(points)}",
                count=len(points),
                minimum=2,
            )
        verts = [Vertex.from_vector(p) for p in points]
        return cls(cls._link(verts, closed=False), winding, is_open=True)

    @classmethod
    def regular_polygon(
        cls, n: int, radius: float, center=None, rotation: float = 0.0
    ) -> "Shape":
        """
        Regular n-gon, first vertex at angle `rotation` from the center.
        """
        if n < 3:
            raise ShapeConstructionError(
                f"Polygon requires at least 3 sides, got {n}", count=n, minimum=3
            )
        c = Vector2.zero() if center is None else Vector2.of(center)
        points = [
            c + Vector2.from_angle(rotation + (i / n) * math.tau) * radius
            for i in range(n)
        ]
        return cls.from_points(points, Winding.CCW)
