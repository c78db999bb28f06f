import math

import pytest

from vectorcanvas.geometry import Mat, Vec
from vectorcanvas.path2d import Path2D, PathFlag, PathPoint
from vectorcanvas.triangulation import (
    TessNet,
    cut_intersections,
    fill_triangles,
    parallel,
    point_is_right_of_line,
    polygon_contains_line,
    polygon_contains_point,
    self_intersecting_path_parts,
    set_path_left_right_inside,
    sub_path_triangles,
    triangle_contains_point,
    triangulate_path,
)

L_SHAPE = [Vec(0, 0), Vec(20, 0), Vec(20, 10), Vec(10, 10), Vec(10, 20), Vec(0, 20)]
BOWTIE = [Vec(0, 0), Vec(10, 10), Vec(10, 0), Vec(0, 10)]


def _points(vecs, last_flags=PathFlag(0)):
    pts = [PathPoint(v) for v in vecs]
    pts[0].flags = PathFlag.MOVE
    pts[-1].flags |= last_flags
    return pts


def _polygon_area(vecs):
    total = 0.0
    for i, a in enumerate(vecs):
        b = vecs[(i + 1) % len(vecs)]
        total += a[0] * b[1] - b[0] * a[1]
    return abs(total) / 2


def _triangles_area(tris):
    assert len(tris) % 3 == 0
    return sum(_polygon_area(tris[i:i + 3]) for i in range(0, len(tris), 3))


def test_point_is_right_of_line_cases():
    assert point_is_right_of_line(Vec(0, 0), Vec(10, 0), Vec(5, 5)) == (False, False)
    assert point_is_right_of_line(Vec(0, 0), Vec(0, 10), Vec(5, 5)) == (True, False)
    assert point_is_right_of_line(Vec(0, 10), Vec(0, 0), Vec(5, 5)) == (True, True)
    assert point_is_right_of_line(Vec(0, 0), Vec(0, 10), Vec(-5, 5)) == (False, False)
    assert point_is_right_of_line(Vec(0, 0), Vec(0, 10), Vec(5, 10)) == (False, False)


def test_triangle_contains_point():
    a, b, c = Vec(0, 0), Vec(10, 0), Vec(0, 10)
    assert triangle_contains_point(a, b, c, Vec(2, 2))
    assert not triangle_contains_point(a, b, c, Vec(8, 8))
    assert not triangle_contains_point(a, b, c, Vec(-1, 5))


def test_parallel():
    assert parallel(Vec(0, 0), Vec(1, 1), Vec(2, 2), Vec(5, 5))
    assert parallel(Vec(0, 0), Vec(1, 1), Vec(5, 5), Vec(2, 2))
    assert not parallel(Vec(0, 0), Vec(1, 0), Vec(0, 0), Vec(0, 1))


def test_polygon_contains_point():
    square = [Vec(0, 0), Vec(10, 0), Vec(10, 10), Vec(0, 10)]
    assert polygon_contains_point(square, Vec(5, 5))
    assert not polygon_contains_point(square, Vec(15, 5))
    assert polygon_contains_point(square, Vec(10, 5))


def test_polygon_contains_line():
    square = [Vec(0, 0), Vec(10, 0), Vec(10, 10), Vec(0, 10)]
    assert polygon_contains_line(square, 0, 2, square[0], square[2])
    arrow = [Vec(0, 0), Vec(10, 0), Vec(10, 10), Vec(5, 2), Vec(0, 10)]
    assert not polygon_contains_line(arrow, 0, 2, arrow[0], arrow[2])


def test_triangulate_square_area():
    square = [Vec(0, 0), Vec(10, 0), Vec(10, 10), Vec(0, 10)]
    tris = triangulate_path(_points(square))
    assert len(tris) == 6
    assert _triangles_area(tris) == pytest.approx(_polygon_area(square))
    assert set(tris) <= set(square)


def test_triangulate_concave_preserves_area():
    tris = triangulate_path(_points(L_SHAPE))
    assert len(tris) == 3 * (len(L_SHAPE) - 2)
    assert _triangles_area(tris) == pytest.approx(_polygon_area(L_SHAPE))
    for i in range(0, len(tris), 3):
        centroid = (tris[i] + tris[i + 1] + tris[i + 2]) / 3
        assert polygon_contains_point(L_SHAPE, centroid)


def test_triangulate_with_matrix_scales_area():
    tris = triangulate_path(_points(L_SHAPE), Mat.scale(2, 2))
    assert _triangles_area(tris) == pytest.approx(_polygon_area(L_SHAPE) * 4)


def test_triangulate_drops_closing_point():
    closed = L_SHAPE + [L_SHAPE[0]]
    tris = triangulate_path(_points(closed))
    assert _triangles_area(tris) == pytest.approx(_polygon_area(L_SHAPE))


def test_triangulate_too_few_points():
    with pytest.raises(ValueError):
        triangulate_path(_points([Vec(0, 0), Vec(1, 1), Vec(0, 0)]))


def test_cut_intersections_without_crossing_is_empty():
    square = [Vec(0, 0), Vec(10, 0), Vec(10, 10), Vec(0, 10)]
    net = cut_intersections(_points(square))
    assert net == TessNet()


def test_cut_intersections_bowtie():
    net = cut_intersections(_points(BOWTIE))
    assert len(net.verts) == len(BOWTIE) + 1
    assert len(net.edges) == len(net.verts) + 1
    crossing = [v for v in net.verts if v.pos == Vec(5, 5)]
    assert len(crossing) == 1
    assert len(crossing[0].attached) == 4
    assert crossing[0].count == 4


def test_set_left_right_inside_bowtie_edges_have_one_inside_side():
    net = cut_intersections(_points(BOWTIE))
    set_path_left_right_inside(net)
    assert all(e.left_inside != e.right_inside for e in net.edges)


def test_self_intersecting_parts_of_bowtie():
    parts = list(self_intersecting_path_parts(_points(BOWTIE)))
    assert len(parts) == 2
    shapes = {frozenset(p.pos for p in part) for part in parts}
    assert shapes == {
        frozenset({Vec(5, 5), Vec(0, 10), Vec(0, 0)}),
        frozenset({Vec(10, 10), Vec(10, 0), Vec(5, 5)}),
    }
    assert all(part[0].flags & PathFlag.MOVE for part in parts)


def test_self_intersecting_parts_of_simple_path_is_unchanged():
    square = [Vec(0, 0), Vec(10, 0), Vec(10, 10), Vec(0, 10)]
    parts = list(self_intersecting_path_parts(_points(square)))
    assert len(parts) == 1
    assert [p.pos for p in parts[0]] == square


def test_sub_path_triangles_self_intersecting_bowtie():
    tris = sub_path_triangles(_points(BOWTIE, PathFlag.SELF_INTERSECTS))
    assert len(tris) == 6
    assert _triangles_area(tris) == pytest.approx(50.0)


def test_sub_path_triangles_convex_fan():
    square = [Vec(0, 0), Vec(10, 0), Vec(10, 10), Vec(0, 10), Vec(0, 0)]
    tris = sub_path_triangles(_points(square, PathFlag.IS_CONVEX))
    assert len(tris) == 6
    assert tris[0] == Vec(0, 0)
    assert _triangles_area(tris) == pytest.approx(_polygon_area(square[:-1]))


def test_fill_triangles_rect_and_translation():
    path = Path2D()
    path.rect(0, 0, 10, 20)
    tris = fill_triangles(path.points)
    assert _triangles_area(tris) == pytest.approx(200.0)
    moved = fill_triangles(path.points, Mat.translate(5, 7))
    assert [t - Vec(5, 7) for t in moved] == pytest.approx(tris)


def test_fill_triangles_two_rects():
    path = Path2D()
    path.rect(0, 0, 10, 10)
    path.rect(20, 0, 10, 10)
    tris = fill_triangles(path.points)
    assert len(tris) == 12
    assert _triangles_area(tris) == pytest.approx(200.0)


def test_fill_triangles_too_short_path():
    path = Path2D()
    path.move_to(0, 0)
    path.line_to(10, 0)
    assert fill_triangles(path.points) == []


def test_fill_triangles_circle_area_close_to_disc():
    path = Path2D()
    path.arc(0, 0, 50, 0, math.pi * 2, False)
    tris = fill_triangles(path.points)
    assert _triangles_area(tris) == pytest.approx(math.pi * 50 * 50, rel=0.01)