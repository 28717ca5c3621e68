from .offset import OffsetShape, line_intersection, offset_points, offset_shape
