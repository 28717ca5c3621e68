import math
import unittest

import numpy as np
from svgelements import Matrix, Path

from patterin.kernel import ShapeConstructionError
from patterin.primitives import Segment, Shape, Vector2, Vertex, Winding

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]


def positions(shape):
    return [(v.x, v.y) for v in shape.vertices]


class TestVertex(unittest.TestCase):
    """Tests vertex normals and cache invalidation."""

    def test_isolated_vertex_has_zero_normal(self):
        self.assertEqual(Vertex(1, 2).normal, Vector2.zero())

    def test_corner_normal_is_average(self):
        square = Shape.from_points(SQUARE)
        n = square.vertices[0].normal
        self.assertAlmostEqual(n.x, -math.sqrt(0.5))
        self.assertAlmostEqual(n.y, -math.sqrt(0.5))

    def test_single_neighbour_normal(self):
        path = Shape.open_path([(0, 0), (10, 0)])
        self.assertTrue(path.vertices[0].normal.equals(path.segments[0].normal))
        self.assertTrue(path.vertices[1].normal.equals(path.segments[0].normal))

    def test_folded_vertex_uses_previous_normal(self):
        spike = Shape.open_path([(0, 0), (10, 0), (0, 0)])
        tip = spike.vertices[1]
        # The two edge normals cancel out.
        self.assertLess((spike.segments[0].normal + spike.segments[1].normal).length(), 1e-10)
        self.assertEqual(tip.normal, spike.segments[0].normal)
        self.assertEqual(tip.normal, Vector2(0, -1))

    def test_move_invalidates_neighbours(self):
        square = Shape.from_points(SQUARE)
        v0, v1 = square.vertices[0], square.vertices[1]
        before = v1.normal
        seg_before = square.segments[0].normal
        v0.position = Vector2(0, -10)
        self.assertFalse(v1.normal.equals(before))
        self.assertFalse(square.segments[0].normal.equals(seg_before))

    def test_x_y_setters_invalidate(self):
        square = Shape.from_points(SQUARE)
        v0 = square.vertices[0]
        seg = square.segments[0]
        self.assertTrue(seg.normal.equals(Vector2(0, -1)))
        v0.y = -10
        self.assertFalse(seg.normal.equals(Vector2(0, -1)))

    def test_move_along_normal(self):
        square = Shape.from_points(SQUARE)
        v = square.vertices[0]
        v.move_along_normal(math.sqrt(2))
        self.assertTrue(v.position.equals(Vector2(-1, -1), 1e-9))

    def test_clone_has_no_links(self):
        square = Shape.from_points(SQUARE)
        copy = square.vertices[0].clone()
        self.assertIsNone(copy.prev_segment)
        self.assertIsNone(copy.next_segment)
        self.assertTrue(copy.equals(square.vertices[0]))
        self.assertEqual(Vertex.from_vector((3, 4)).position, Vector2(3, 4))


class TestSegment(unittest.TestCase):
    """Tests segment measures, normals and intersections."""

    def test_measures(self):
        seg = Segment(Vertex(0, 0), Vertex(10, 0))
        self.assertEqual(seg.length(), 10)
        self.assertEqual(seg.direction(), Vector2(1, 0))
        self.assertEqual(seg.direction_raw(), Vector2(10, 0))
        self.assertEqual(seg.midpoint(), Vector2(5, 0))
        self.assertEqual(seg.point_at(0.25), Vector2(2.5, 0))
        self.assertFalse(seg.is_degenerate())
        self.assertTrue(Segment(Vertex(1, 1), Vertex(1, 1)).is_degenerate())

    def test_normal_follows_winding(self):
        seg = Segment(Vertex(0, 0), Vertex(10, 0))
        self.assertTrue(seg.normal.equals(Vector2(0, -1)))
        seg.winding = "cw"
        self.assertIs(seg.winding, Winding.CW)
        self.assertTrue(seg.normal.equals(Vector2(0, 1)))

    def test_intersect(self):
        a = Segment(Vertex(0, 0), Vertex(10, 10))
        b = Segment(Vertex(0, 10), Vertex(10, 0))
        self.assertTrue(a.intersect(b).equals(Vector2(5, 5)))
        parallel = Segment(Vertex(0, 1), Vertex(10, 11))
        self.assertIsNone(a.intersect(parallel))
        short = Segment(Vertex(0, 0), Vertex(1, 1))
        self.assertIsNone(short.intersect(b))

    def test_intersect_ray(self):
        seg = Segment(Vertex(5, -5), Vertex(5, 5))
        hit = seg.intersect_ray(Vector2(0, 0), Vector2(1, 0))
        self.assertTrue(hit.equals(Vector2(5, 0)))
        self.assertIsNone(seg.intersect_ray((0, 0), (-1, 0)))
        self.assertIsNone(seg.intersect_ray((0, 0), (0, 1)))

    def test_adjacency(self):
        square = Shape.from_points(SQUARE)
        segs = square.segments
        self.assertIs(segs[0].next, segs[1])
        self.assertIs(segs[0].prev, segs[3])
        self.assertIs(segs[3].next, segs[0])
        self.assertIs(segs[2].owner, square)
        self.assertEqual(segs[2].index, 2)

    def test_adjacency_open_and_orphan(self):
        path = Shape.open_path([(0, 0), (10, 0), (10, 10)])
        segs = path.segments
        self.assertIsNone(segs[0].prev)
        self.assertIsNone(segs[-1].next)
        self.assertIs(segs[0].next, segs[1])
        orphan = Segment(Vertex(0, 0), Vertex(1, 0))
        self.assertIsNone(orphan.next)
        self.assertIsNone(orphan.prev)
        self.assertIsNone(segs[0].clone().owner)


class TestShape(unittest.TestCase):
    """Tests shape construction, measures and transforms."""

    def setUp(self):
        self.square = Shape.from_points(SQUARE)

    def test_vertices_reproduce_points(self):
        self.assertEqual(positions(self.square), [(0, 0), (10, 0), (10, 10), (0, 10)])
        self.assertEqual(len(self.square), 4)
        self.assertTrue(self.square.closed)

    def test_loop_continuity(self):
        segs = self.square.segments
        n = len(segs)
        for i in range(n):
            self.assertTrue(segs[i].end.equals(segs[(i + 1) % n].start, 1e-9))

    def test_area_and_centroid(self):
        self.assertEqual(self.square.area(), 100)
        self.assertEqual(self.square.winding, Winding.CCW)
        self.assertTrue(self.square.centroid().equals(Vector2(5, 5)))

    def test_area_weighted_centroid(self):
        # Extra collinear vertex on the bottom edge does not pull the centroid.
        shape = Shape.from_points([(0, 0), (2, 0), (10, 0), (10, 10), (0, 10)])
        self.assertTrue(shape.centroid().equals(Vector2(5, 5), 1e-9))

    def test_winding_inferred(self):
        shape = Shape.from_points(list(reversed(SQUARE)))
        self.assertEqual(shape.winding, Winding.CW)
        self.assertEqual(shape.area(), -100)
        self.assertTrue(shape.validate().valid)

    def test_reverse(self):
        self.square.reverse()
        self.assertEqual(self.square.winding, "cw")
        self.assertEqual(self.square.area(), -100)
        self.assertEqual(positions(self.square), [(0, 10), (10, 10), (10, 0), (0, 0)])
        self.square.reverse()
        self.assertEqual(self.square.winding, Winding.CCW)
        self.assertEqual(self.square.area(), 100)
        self.assertEqual(positions(self.square), [(0, 0), (10, 0), (10, 10), (0, 10)])

    def test_too_few_points(self):
        with self.assertRaises(ShapeConstructionError) as context:
            Shape.from_points([(0, 0), (1, 1)])
        self.assertEqual(context.exception.count, 2)
        self.assertEqual(context.exception.minimum, 3)
        with self.assertRaises(ValueError):
            Shape.open_path([(0, 0)])
        with self.assertRaises(ShapeConstructionError):
            Shape.regular_polygon(2, 10)

    def test_regular_polygon(self):
        shape = Shape.regular_polygon(4, 10, center=(5, 5))
        self.assertEqual(len(shape), 4)
        self.assertTrue(shape.vertices[0].position.equals(Vector2(15, 5), 1e-9))
        self.assertGreater(shape.area(), 0)
        self.assertTrue(shape.centroid().equals(Vector2(5, 5), 1e-9))

    def test_bounding_box_and_perimeter(self):
        box = self.square.bounding_box()
        self.assertEqual(box.min, Vector2(0, 0))
        self.assertEqual(box.max, Vector2(10, 10))
        self.assertEqual(box.width, 10)
        self.assertEqual(box.height, 10)
        self.assertEqual(box.center, Vector2(5, 5))
        self.assertEqual(self.square.perimeter(), 40)

    def test_contains_point(self):
        self.assertTrue(self.square.contains_point(self.square.centroid()))
        self.assertFalse(self.square.contains_point((50, 50)))

    def test_contains_point_at_vertex_height(self):
        diamond = Shape.from_points([(0, -10), (10, 0), (0, 10), (-10, 0)])
        self.assertTrue(diamond.contains_point((0, 0)))
        self.assertFalse(diamond.contains_point((20, 0)))

    def test_scale(self):
        self.square.scale(2)
        self.assertEqual(self.square.area(), 400)
        self.assertTrue(self.square.vertices[0].position.equals(Vector2(-5, -5)))
        self.square.scale_xy(0.5, 1)
        box = self.square.bounding_box()
        self.assertAlmostEqual(box.width, 10)
        self.assertAlmostEqual(box.height, 20)

    def test_rotate(self):
        self.square.rotate(math.pi / 2)
        self.assertTrue(self.square.vertices[0].position.equals(Vector2(10, 0), 1e-9))
        self.assertAlmostEqual(self.square.area(), 100)

    def test_translate_and_move_to(self):
        self.square.translate((1, 2))
        self.assertEqual(self.square.vertices[0].position, Vector2(1, 2))
        self.square.move_to(Vector2(0, 0))
        self.assertTrue(self.square.centroid().equals(Vector2(0, 0), 1e-9))

    def test_transform_matrix(self):
        self.square.transform(Matrix.translate(5, 0))
        self.assertTrue(self.square.vertices[0].position.equals(Vector2(5, 0)))
        self.assertEqual(self.square.winding, Winding.CCW)

    def test_mirror_flips_winding(self):
        self.square.transform(Matrix.scale(-1, 1))
        self.assertEqual(self.square.area(), -100)
        self.assertEqual(self.square.winding, Winding.CW)
        self.assertTrue(self.square.validate().valid)

    def test_mirrored_scale_flips_winding(self):
        self.square.scale_xy(-1, 1)
        self.assertAlmostEqual(self.square.area(), -100)
        self.assertEqual(self.square.winding, Winding.CW)
        self.assertTrue(self.square.validate().valid)
        for seg in self.square.segments:
            self.assertEqual(seg.winding, Winding.CW)
        # Mirroring on both axes is a rotation.
        self.square.scale_xy(-1, -1)
        self.assertEqual(self.square.winding, Winding.CW)
        self.assertTrue(self.square.validate().valid)

    def test_open_constructor_flag(self):
        segments = Shape._link([Vertex(0, 0), Vertex(10, 0)], closed=False)
        path = Shape(segments, is_open=True)
        self.assertTrue(path.open)
        self.assertFalse(path.closed)
        self.assertEqual(len(path.vertices), 2)

    def test_validate(self):
        self.assertTrue(self.square.validate().valid)
        self.assertEqual(self.square.validate().errors, [])
        wrong = Shape.from_points(SQUARE, winding="cw")
        result = wrong.validate()
        self.assertFalse(result.valid)
        self.assertEqual(len(result.errors), 1)
        empty = Shape().validate()
        self.assertFalse(empty.valid)
        self.assertEqual(empty.errors, ["Shape has no segments"])

    def test_validate_degenerate(self):
        shape = Shape.from_points([(0, 0), (10, 0), (10, 0), (10, 10), (0, 10)])
        result = shape.validate()
        self.assertFalse(result.valid)
        self.assertIn("Segment 1 is degenerate (zero length)", result.errors)

    def test_remove_degenerate(self):
        shape = Shape.from_points([(0, 0), (10, 0), (10, 0), (10, 10), (0, 10)])
        shape.remove_degenerate()
        self.assertEqual(len(shape), 4)
        self.assertEqual(positions(shape), [(0, 0), (10, 0), (10, 10), (0, 10)])
        self.assertTrue(shape.validate().valid)

    def test_clone_is_independent(self):
        self.square.group = "frame"
        self.square.color = "#ff0000"
        self.square.mark_ephemeral()
        copy = self.square.clone()
        copy.vertices[0].position = Vector2(-3, -3)
        self.assertEqual(self.square.vertices[0].position, Vector2(0, 0))
        self.assertTrue(copy.ephemeral)
        self.assertEqual(copy.group, "frame")
        self.assertEqual(copy.color, "#ff0000")
        self.assertIsNot(copy.segments[0], self.square.segments[0])
        copy.trace()
        self.assertFalse(copy.ephemeral)
        self.assertTrue(self.square.ephemeral)

    def test_path_data(self):
        d = self.square.to_path_data()
        self.assertTrue(d.startswith("M"))
        self.assertTrue(d.rstrip().endswith("Z"))
        self.assertEqual(tuple(Path(d).bbox()), (0, 0, 10, 10))
        path = Shape.open_path([(0, 0), (10, 0), (10, 10)])
        self.assertFalse(path.to_path_data().rstrip().endswith("Z"))
        self.assertEqual(Shape().to_path_data(), "")

    def test_as_array(self):
        array = self.square.as_array()
        self.assertEqual(array.shape, (4, 2))
        np.testing.assert_array_equal(array[2], [10, 10])

    def test_open_path(self):
        path = Shape.open_path([(0, 0), (10, 0), (10, 10)])
        self.assertTrue(path.open)
        self.assertFalse(path.closed)
        self.assertEqual(len(path), 2)
        self.assertEqual(len(path.vertices), 3)
        self.assertTrue(path.validate().valid)
        self.assertTrue(path.centroid().equals(Vector2(20 / 3, 10 / 3), 1e-9))
        self.assertFalse(path.contains_point((9, 1)))

    def test_replace_segments_orphans_old(self):
        old = self.square.segments
        other = Shape.from_points([(0, 0), (5, 0), (0, 5)])
        self.square.replace_segments(other.segments, other.winding)
        self.assertIsNone(old[0].owner)
        self.assertIs(self.square.segments[0].owner, self.square)
        self.assertEqual(len(self.square), 3)
