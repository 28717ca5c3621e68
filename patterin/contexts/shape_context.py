"""
Editing contexts.

A context wraps geometry with a chainable editing API. ShapeContext wraps one shape,
PointsContext a selection of vertices, LinesContext a selection of segments and
ShapesContext a collection of shapes. Point and line selections edit the shapes that
own the selected items in place.
"""

import math

from svgelements import Path

from ..collectors.svgcollector import DEFAULT_STYLES, validate_color
from ..core.defaults import defaults
from ..kernel.channels import get_channel
from ..primitives.segment import Segment
from ..primitives.shape import BoundingBox, Shape
from ..primitives.vector2 import Vector2
from ..primitives.vertex import Vertex
from .selectable import SelectableContext


def resolve(value):
    """
    Numeric arguments may be zero-argument callables producing the next value.
    """
    if callable(value):
        return value()
    return value


def owner_of(vertex):
    seg = vertex.next_segment or vertex.prev_segment
    return seg.owner if seg is not None else None


def line_path_data(points, dx=0.0, dy=0.0) -> str:
    """Open polyline path data through points, shifted by (dx, dy)."""
    path = Path()
    first = True
    for p in points:
        if first:
            path.move((p.x + dx, p.y + dy))
            first = False
        else:
            path.line((p.x + dx, p.y + dy))
    return path.d()


def _unique_shapes(shapes):
    seen = set()
    result = []
    for shape in shapes:
        if shape is None or id(shape) in seen:
            continue
        seen.add(id(shape))
        result.append(shape)
    return result


def _set_ephemeral(shape, ephemeral):
    if shape.ephemeral == ephemeral:
        return
    if ephemeral:
        shape.mark_ephemeral()
    else:
        shape.trace()
    channel = get_channel("contexts")
    if channel:
        channel(f"{shape!r} is now {'ephemeral' if ephemeral else 'concrete'}")


def _rebuild(shape, points):
    """
    Replace the outline of shape with the given points, keeping identity and winding.
    Returns False when there are too few points to rebuild.
    """
    if shape.open:
        if len(points) < 2:
            return False
        rebuilt = Shape.open_path(points, shape.winding)
    else:
        if len(points) < 3:
            return False
        rebuilt = Shape.from_points(points, shape.winding)
    shape.replace_segments(rebuilt.segments, rebuilt.winding)
    return True


class ShapeContext:
    """
    Chainable editing API over a single shape. Transforms return the context itself.
    """

    def __init__(self, shape: Shape):
        self._shape = shape

    def __repr__(self):
        return f"{type(self).__name__}({self._shape!r})"

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def vertices(self):
        return self._shape.vertices

    @property
    def segments(self):
        return self._shape.segments

    @property
    def center(self) -> Vector2:
        return self._shape.centroid()

    @property
    def centroid(self) -> Vector2:
        return self._shape.centroid()

    @property
    def winding(self):
        return self._shape.winding

    @property
    def perimeter(self) -> float:
        return self._shape.perimeter()

    @property
    def is_ephemeral(self) -> bool:
        return self._shape.ephemeral

    @property
    def points(self) -> "PointsContext":
        return PointsContext(self._shape, self._shape.vertices)

    @property
    def lines(self) -> "LinesContext":
        return LinesContext(self._shape, self._shape.segments)

    # Transforms

    def scale(self, fx, fy=None):
        if fy is None:
            self._shape.scale(fx)
        else:
            self._shape.scale_xy(fx, fy)
        return self

    def scale_x(self, factor):
        self._shape.scale_xy(factor, 1.0)
        return self

    def scale_y(self, factor):
        self._shape.scale_xy(1.0, factor)
        return self

    def rotate(self, degrees):
        self._shape.rotate(math.radians(degrees))
        return self

    def rotate_rad(self, radians):
        self._shape.rotate(radians)
        return self

    def move_to(self, x, y=None):
        """
        Move the centroid to (x, y). A single vector-like argument is also accepted.
        """
        if y is None:
            self._shape.move_to(Vector2.of(x))
        else:
            self._shape.move_to(Vector2(x, y))
        return self

    def translate(self, x, y):
        self._shape.translate(Vector2(x, y))
        return self

    def x(self, pos):
        self._shape.translate(Vector2(pos - self._shape.centroid().x, 0))
        return self

    def y(self, pos):
        self._shape.translate(Vector2(0, pos - self._shape.centroid().y))
        return self

    def xy(self, x, y):
        return self.move_to(x, y)

    def reverse(self):
        self._shape.reverse()
        return self

    # Offsets

    def offset(self, distance, miter_limit=None):
        """
        Replace the outline with its offset. Positive distances grow the shape.
        """
        result = self._shape.offset(distance, miter_limit)
        self._shape.replace_segments(result.segments, result.winding)
        return self

    def expand(self, distance, miter_limit=None):
        return self.offset(abs(distance), miter_limit)

    def inset(self, distance, miter_limit=None):
        return self.offset(-abs(distance), miter_limit)

    def offset_shape(self, distance, miter_limit=None) -> "ShapeContext":
        """New context over an offset copy. This shape is left as it is."""
        return ShapeContext(self._shape.offset(distance, miter_limit))

    def offset_copies(
        self, distance, count, miter_limit=None, include_original=False
    ) -> "ShapesContext":
        """
        Successive offsets, each one taken from the previous result.

        @param distance: offset per step
        @param count: number of copies
        @param miter_limit: bevel threshold as a multiple of |distance|
        @param include_original: put this shape first in the result
        @return: ShapesContext
        """
        shapes = [self._shape] if include_original else []
        current = self._shape
        for _ in range(count):
            current = current.offset(distance, miter_limit)
            shapes.append(current)
        return ShapesContext(shapes)

    # State and tags

    def trace(self):
        _set_ephemeral(self._shape, False)
        return self

    def mark_ephemeral(self):
        _set_ephemeral(self._shape, True)
        return self

    def color(self, value):
        self._shape.color = None if value is None else validate_color(value)
        return self

    def group(self, name):
        self._shape.group = name
        return self

    # Derived geometry

    def bbox(self):
        """Ephemeral RectContext covering the bounding box of the shape."""
        from .specialized import RectContext

        bounds = self._shape.bounding_box()
        rect = RectContext(bounds.width, bounds.height, center=bounds.center)
        rect.shape.mark_ephemeral()
        return rect

    def center_point(self) -> Vector2:
        return self._shape.centroid()

    def explode(self) -> "LinesContext":
        """
        Free copies of every segment. The shape itself becomes ephemeral.
        """
        _set_ephemeral(self._shape, True)
        orphans = [
            Segment(
                Vertex.from_vector(seg.start.position),
                Vertex.from_vector(seg.end.position),
                seg.winding,
            )
            for seg in self._shape.segments
        ]
        return LinesContext(self._shape, orphans)

    def collapse(self):
        from .point_context import PointContext

        _set_ephemeral(self._shape, True)
        return PointContext(self._shape.centroid(), self._shape)

    def clone(self, n=1, x=0, y=0) -> "ShapesContext":
        """
        n + 1 concrete copies, copy i shifted by (x * i, y * i). The shape itself
        becomes ephemeral so only the copies render.
        """
        step = Vector2(x, y)
        copies = []
        for i in range(n + 1):
            duplicate = self._shape.clone()
            duplicate.trace()
            if i:
                duplicate.translate(step * i)
            copies.append(duplicate)
        _set_ephemeral(self._shape, True)
        return ShapesContext(copies)

    def stamp(self, collector, x=0, y=0, style=None):
        if self._shape.ephemeral:
            return
        duplicate = self._shape.clone()
        if x or y:
            duplicate.translate(Vector2(x, y))
        collector.add_shape(duplicate, style)


class PointsContext(SelectableContext):
    """
    Selection of vertices. `shape` is the reference shape the selection came from,
    edits apply to whichever shapes own the selected vertices.
    """

    def __init__(self, shape, vertices):
        super().__init__(vertices)
        self._shape = shape

    def _create(self, items):
        return PointsContext(self._shape, items)

    @property
    def shape(self):
        return self._shape

    @property
    def vertices(self):
        return list(self._items)

    def _parent_shapes(self):
        return _unique_shapes([owner_of(v) for v in self._items] + [self._shape])

    def expand(self, distance):
        """
        Move every selected vertex along its normal. Normals are taken before any
        vertex moves, so adjacent selected vertices do not see each other's
        displacement. Moving them one at a time with `Vertex.move_along_normal`
        gives different positions wherever two selected vertices share an edge.
        """
        normals = [v.normal for v in self._items]
        for v, normal in zip(self._items, normals):
            v.position = v.position + normal * distance
        for shape in self._parent_shapes():
            for seg in shape.segments:
                seg.invalidate_normal()
        return ShapeContext(self._shape)

    def inset(self, distance):
        return self.expand(-distance)

    def move(self, x, y):
        delta = Vector2(x, y)
        for v in self._items:
            v.position = v.position + delta
        return self

    def mid_point(self) -> Vector2:
        if not self._items:
            return Vector2.zero()
        return Vector2(
            sum(v.x for v in self._items) / len(self._items),
            sum(v.y for v in self._items) / len(self._items),
        )

    def bbox(self) -> BoundingBox:
        return BoundingBox.of_points(self._items)

    def expand_to_circles(self, radius, segments=None) -> "ShapesContext":
        if segments is None:
            segments = defaults.circle_segments
        return ShapesContext(
            [Shape.regular_polygon(segments, radius, v.position) for v in self._items]
        )

    def raycast(self, distance, direction) -> "PointsContext":
        """
        Endpoints of rays cast from every selected vertex.

        @param distance: ray length
        @param direction: angle in degrees, or 'outward' / 'inward' along the vertex normal
        @return: PointsContext of free vertices at the ray ends
        """
        if isinstance(direction, str) and direction not in ("outward", "inward"):
            raise ValueError(f"Unknown ray direction '{direction}'")
        ends = []
        for v in self._items:
            if isinstance(direction, str):
                angle = self._relative_angle(v, direction)
            else:
                angle = math.radians(direction)
            ends.append(Vertex.from_vector(v.position + Vector2.from_angle(angle) * distance))
        return PointsContext(self._shape, ends)

    def _relative_angle(self, vertex, direction):
        normal = vertex.normal
        if normal.length() > 0.001:
            angle = normal.angle()
            return angle + math.pi if direction == "inward" else angle
        # No usable normal, aim away from or toward the center of the shape.
        shape = owner_of(vertex)
        if shape is None:
            shape = self._shape
        center = shape.centroid() if shape is not None else Vector2.zero()
        angle = (center - vertex.position).angle()
        return angle + math.pi if direction == "outward" else angle

    def round(self, radius, segments=None) -> ShapeContext:
        """
        Replace each selected corner with a tangent arc of the given radius. The radius
        shrinks where the arc would use more than half of either adjacent edge.
        """
        if segments is None:
            segments = defaults.circle_segments
        if radius <= 0:
            return ShapeContext(self._shape)
        selected = set(map(id, self._items))
        for shape in self._parent_shapes():
            verts = shape.vertices
            n = len(verts)
            if n < 3:
                continue
            points = []
            for i, current in enumerate(verts):
                at_end = shape.open and (i == 0 or i == n - 1)
                if id(current) not in selected or at_end:
                    points.append(current.position)
                    continue
                points.extend(
                    _corner_arc(
                        verts[i - 1].position,
                        current.position,
                        verts[(i + 1) % n].position,
                        radius,
                        segments,
                    )
                )
            _rebuild(shape, points)
        return ShapeContext(self._shape)


def _corner_arc(p1, p2, p3, radius, segments):
    v1 = p1 - p2
    v2 = p3 - p2
    len1 = v1.length()
    len2 = v2.length()
    if len1 < 1e-6 or len2 < 1e-6:
        return [p2]
    d1 = v1 / len1
    d2 = v2 / len2
    angle = math.acos(max(-1.0, min(1.0, d1.dot(d2))))
    if abs(angle - math.pi) < 1e-4 or abs(angle) < 1e-4:
        # Straight or folded corners have no arc.
        return [p2]
    half_tan = math.tan(angle / 2)
    tangent = radius / half_tan
    effective = radius
    limit = min(len1, len2) / 2
    if tangent > limit:
        tangent = limit
        effective = tangent * half_tan
    t1 = p2 + d1 * tangent
    t2 = p2 + d2 * tangent
    center = p2 + (d1 + d2).normalize() * (effective / math.sin(angle / 2))
    start = (t1 - center).angle()
    sweep = (t2 - center).angle() - start
    if sweep > math.pi:
        sweep -= math.tau
    elif sweep < -math.pi:
        sweep += math.tau
    count = max(1, math.ceil(abs(sweep) / math.tau * segments))
    return [
        center + Vector2.from_angle(start + sweep * j / count) * effective
        for j in range(count + 1)
    ]


class LinesContext(SelectableContext):
    """
    Selection of segments, possibly from several shapes. Segments remember the shape
    that owns them; free segments (from explode) have no owner and are never rewritten.
    """

    def __init__(self, shape, segments):
        super().__init__(segments)
        self._shape = shape

    def _create(self, items):
        return LinesContext(self._shape, items)

    @property
    def shape(self):
        return self._shape

    @property
    def segments(self):
        return list(self._items)

    def _by_owner(self):
        groups = {}
        for seg in self._items:
            owner = seg.owner
            if owner is None:
                continue
            groups.setdefault(id(owner), (owner, set()))[1].add(id(seg))
        return list(groups.values())

    def extrude(self, distance) -> "ShapesContext":
        """
        Push every selected edge out along its normal, joining it back to its
        neighbours with two new edges.

        @param distance: extrusion depth
        @return: ShapesContext of the shapes that were rewritten
        """
        affected = []
        epsilon = defaults.epsilon
        for shape, selected in self._by_owner():
            segments = shape.segments
            points = []
            for seg in segments:
                points.append(seg.start.position)
                if id(seg) in selected:
                    shift = seg.normal * distance
                    points.append(seg.start.position + shift)
                    points.append(seg.end.position + shift)
            if shape.open:
                points.append(segments[-1].end.position)
            unique = points[:1]
            for p in points[1:]:
                if not p.equals(unique[-1], epsilon):
                    unique.append(p)
            if not shape.open and len(unique) > 1 and unique[0].equals(unique[-1], epsilon):
                unique.pop()
            if _rebuild(shape, unique):
                channel = get_channel("geometry")
                if channel:
                    channel(f"Extruded {len(selected)} edge(s) of {shape!r} by {distance:g}")
            affected.append(shape)
        return ShapesContext(affected)

    def divide(self, n) -> PointsContext:
        """
        n - 1 evenly spaced free points inside every selected edge. Nothing is changed.
        """
        points = []
        for seg in self._items:
            for i in range(1, n):
                points.append(Vertex.from_vector(seg.point_at(i / n)))
        return PointsContext(self._shape, points)

    def subdivide(self, n) -> "LinesContext":
        """
        Split every selected edge into n edges inside its shape.

        @return: LinesContext of the new edges, or this selection when n < 2
        """
        if n < 2:
            return self._create(self._items)
        created = []
        reference = None
        for shape, selected in self._by_owner():
            if reference is None:
                reference = shape
            rebuilt = []
            for seg in shape.segments:
                if id(seg) not in selected:
                    rebuilt.append(seg)
                    continue
                verts = [seg.start]
                verts.extend(Vertex.from_vector(seg.point_at(i / n)) for i in range(1, n))
                verts.append(seg.end)
                parts = [Segment(verts[i], verts[i + 1], seg.winding) for i in range(n)]
                rebuilt.extend(parts)
                created.extend(parts)
            shape.replace_segments(rebuilt)
            channel = get_channel("geometry")
            if channel:
                channel(f"Subdivided {len(selected)} edge(s) of {shape!r} into {n}")
        return LinesContext(self._shape if reference is None else reference, created)

    def mid_point(self) -> Vector2:
        if not self._items:
            return Vector2.zero()
        total = Vector2.zero()
        for seg in self._items:
            total = total + seg.midpoint()
        return total / len(self._items)

    def collapse(self) -> PointsContext:
        """
        Midpoints of the selected edges as free points. The shapes are not changed.
        """
        return PointsContext(
            self._shape, [Vertex.from_vector(seg.midpoint()) for seg in self._items]
        )

    def expand_to_rect(self, distance) -> "ShapesContext":
        rects = []
        for seg in self._items:
            start = seg.start.position
            end = seg.end.position
            shift = seg.normal * distance
            rects.append(
                Shape.from_points([start - shift, end - shift, end + shift, start + shift])
            )
        return ShapesContext(rects)

    def stamp(self, collector, x=0, y=0, style=None):
        final = DEFAULT_STYLES["line"].merged(style)
        for seg in self._items:
            collector.add_path(
                line_path_data([seg.start.position, seg.end.position], x, y), final
            )


class ShapesContext(SelectableContext):
    """
    Collection of shapes edited together.

    Numeric arguments of the bulk transforms (and color) may be zero-argument callables,
    called once per shape for the next value.
    """

    def __init__(self, shapes):
        super().__init__(shapes)

    def _create(self, items):
        return ShapesContext(items)

    @property
    def shapes(self):
        return list(self._items)

    def slice(self, start, end=None) -> "ShapesContext":
        return ShapesContext(self._items[start:end])

    def _reference(self):
        return self._items[0] if self._items else Shape()

    @property
    def points(self) -> PointsContext:
        return PointsContext(self._reference(), self.vertices)

    @property
    def lines(self) -> LinesContext:
        return LinesContext(self._reference(), self.segments)

    @property
    def vertices(self):
        return [v for shape in self._items for v in shape.vertices]

    @property
    def segments(self):
        return [seg for shape in self._items for seg in shape.segments]

    def get_bounds(self) -> BoundingBox:
        return BoundingBox.of_points(self.vertices)

    @property
    def center(self) -> Vector2:
        return self.get_bounds().center

    # Layout

    def spread(self, x, y):
        """Shift shape i by (x * i, y * i)."""
        step = Vector2(x, y)
        for i, shape in enumerate(self._items):
            shape.translate(step * i)
        return self

    def spread_polar(self, radius, arc=None):
        """
        Center the shapes on a circle around the origin.

        @param radius: circle radius
        @param arc: end angle in degrees, or a (start, end) pair. A full 360 degree
            sweep leaves a gap so the last shape does not land on the first.
        """
        start, end = 0.0, 360.0
        if isinstance(arc, (tuple, list)):
            start, end = arc
        elif arc is not None:
            end = arc
        n = len(self._items)
        if n == 0:
            return self
        sweep = end - start
        step = sweep / n if sweep == 360 else sweep / max(1, n - 1)
        for i, shape in enumerate(self._items):
            shape.move_to(Vector2.from_angle(math.radians(start + step * i)) * radius)
        return self

    def clone(self, n=1, x=0, y=0) -> "ShapesContext":
        """
        The shapes followed by n copies of the whole selection, copy k shifted by
        (x * k, y * k).
        """
        step = Vector2(x, y)
        result = list(self._items)
        for k in range(1, n + 1):
            for shape in self._items:
                duplicate = shape.clone()
                duplicate.translate(step * k)
                result.append(duplicate)
        return ShapesContext(result)

    # Transforms

    def scale(self, factor):
        for shape in self._items:
            shape.scale(resolve(factor))
        return self

    def scale_x(self, factor):
        for shape in self._items:
            shape.scale_xy(resolve(factor), 1.0)
        return self

    def scale_y(self, factor):
        for shape in self._items:
            shape.scale_xy(1.0, resolve(factor))
        return self

    def rotate(self, degrees):
        for shape in self._items:
            shape.rotate(math.radians(resolve(degrees)))
        return self

    def translate(self, x, y):
        for shape in self._items:
            shape.translate(Vector2(resolve(x), resolve(y)))
        return self

    def move_to(self, x, y=None):
        """Move the center of the collection bounds to (x, y)."""
        target = Vector2.of(x) if y is None else Vector2(x, y)
        delta = target - self.center
        return self.translate(delta.x, delta.y)

    def x(self, pos):
        """
        Move the collection horizontally so its bounds center sits at pos. A callable
        positions each shape's centroid on its own value instead.
        """
        if callable(pos):
            for shape in self._items:
                shape.translate(Vector2(pos() - shape.centroid().x, 0))
            return self
        return self.translate(pos - self.center.x, 0)

    def y(self, pos):
        if callable(pos):
            for shape in self._items:
                shape.translate(Vector2(0, pos() - shape.centroid().y))
            return self
        return self.translate(0, pos - self.center.y)

    def xy(self, x, y):
        return self.move_to(x, y)

    # Offsets

    def offset(self, distance, miter_limit=None):
        for shape in self._items:
            ShapeContext(shape).offset(resolve(distance), miter_limit)
        return self

    def expand(self, distance, miter_limit=None):
        return self.offset(abs(distance), miter_limit)

    def inset(self, distance, miter_limit=None):
        return self.offset(-abs(distance), miter_limit)

    def offset_copies(
        self, distance, count, miter_limit=None, include_original=False
    ) -> "ShapesContext":
        result = []
        for shape in self._items:
            result.extend(
                ShapeContext(shape)
                .offset_copies(distance, count, miter_limit, include_original)
                .shapes
            )
        return ShapesContext(result)

    # State and tags

    def trace(self):
        for shape in self._items:
            _set_ephemeral(shape, False)
        return self

    def mark_ephemeral(self):
        for shape in self._items:
            _set_ephemeral(shape, True)
        return self

    def color(self, value):
        for shape in self._items:
            current = resolve(value)
            shape.color = None if current is None else validate_color(current)
        return self

    def group(self, name):
        for shape in self._items:
            shape.group = name
        return self

    def stamp(self, collector, x=0, y=0, style=None):
        for shape in self._items:
            ShapeContext(shape).stamp(collector, x, y, style)
