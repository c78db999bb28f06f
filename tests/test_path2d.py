import math

import pytest

from vectorcanvas.geometry import Vec
from vectorcanvas.path2d import (
    FillRule,
    Path2D,
    PathFlag,
    PathPoint,
    PerformanceSettings,
    iter_sub_paths,
)


def _bent_path(**kwargs):
    path = Path2D(**kwargs)
    path.move_to(0, 0)
    path.line_to(10, 0)
    path.line_to(10, 10)
    path.line_to(20, 10)
    path.line_to(2, 5)
    return path


def _has(points, flag):
    return [bool(p.flags & flag) for p in points]


def test_move_to_flags():
    path = Path2D()
    path.move_to(3, 4)
    assert path.points[0].pos == Vec(3, 4)
    assert path.points[0].flags == PathFlag.MOVE | PathFlag.IS_CONVEX


def test_line_to_on_empty_path_moves():
    path = Path2D()
    path.line_to(5, 6)
    assert len(path) == 1
    assert path.points[0].flags & PathFlag.MOVE


def test_nearby_points_are_merged():
    path = Path2D()
    path.move_to(0, 0)
    path.line_to(10, 0)
    path.line_to(10.05, 0.05)
    assert len(path) == 2


def test_line_to_attaches_previous_point():
    path = Path2D()
    path.move_to(0, 0)
    path.line_to(10, 0)
    first = path.points[0]
    assert first.next == Vec(10, 0)
    assert first.flags & PathFlag.ATTACH


def test_rect_points_and_flags():
    path = Path2D()
    path.rect(1, 2, 10, 20)
    assert [p.pos for p in path.points] == [
        Vec(1, 2), Vec(11, 2), Vec(11, 22), Vec(1, 22), Vec(1, 2)
    ]
    assert path.points[-1].flags & PathFlag.IS_RECT
    assert path.points[-1].flags & PathFlag.IS_CONVEX


def test_point_in_rect_nonzero():
    path = Path2D()
    path.rect(0, 0, 10, 10)
    assert path.is_point_in_path(5, 5, FillRule.NON_ZERO)
    assert not path.is_point_in_path(15, 5, FillRule.NON_ZERO)
    assert not path.is_point_in_path(5, -3)


def test_close_path_returns_to_start():
    path = Path2D()
    path.move_to(0, 0)
    path.line_to(10, 0)
    path.line_to(10, 10)
    path.close_path()
    last = path.points[-1]
    assert last.pos == path.points[0].pos
    assert last.next == path.points[0].next
    assert last.flags & PathFlag.ATTACH


def test_close_path_on_single_point_does_nothing():
    path = Path2D()
    path.move_to(1, 1)
    path.close_path()
    assert len(path) == 1


def test_full_circle_points_lie_on_circle():
    path = Path2D()
    path.arc(50, 40, 20, 0, math.pi * 2, False)
    assert len(path) > 10
    for p in path.points:
        assert math.hypot(p.pos.x - 50, p.pos.y - 40) == pytest.approx(20)
    assert path.points[-1].flags & PathFlag.IS_CONVEX


def test_arc_with_equal_angles_adds_single_point():
    path = Path2D()
    path.arc(0, 0, 5, 1.0, 1.0, False)
    assert len(path) == 1
    assert path.points[0].pos == pytest.approx((5 * math.cos(1.0), 5 * math.sin(1.0)))


def test_anticlockwise_arc_ends_at_end_angle():
    path = Path2D()
    path.arc(0, 0, 10, 0, -math.pi / 2, True)
    end = path.points[-1].pos
    assert end == pytest.approx((10 * math.cos(-math.pi / 2), 10 * math.sin(-math.pi / 2)), abs=1e-9)
    assert len(path) > 2


def test_ellipse_points_satisfy_equation():
    path = Path2D()
    path.ellipse(0, 0, 30, 10, 0, 0, math.pi, False)
    for p in path.points:
        assert (p.pos.x / 30) ** 2 + (p.pos.y / 10) ** 2 == pytest.approx(1)


def test_quadratic_curve_ends_at_target():
    path = Path2D()
    path.move_to(0, 0)
    path.quadratic_curve_to(50, 100, 100, 0)
    assert path.points[-1].pos == Vec(100, 0)
    assert len(path) > 3


def test_bezier_curve_ends_at_target():
    path = Path2D()
    path.move_to(0, 0)
    path.bezier_curve_to(0, 50, 100, 50, 100, 0)
    assert path.points[-1].pos == Vec(100, 0)
    assert all(0 <= p.pos.y <= 50 for p in path.points)


def test_curves_on_empty_path_do_nothing():
    path = Path2D()
    path.quadratic_curve_to(1, 2, 3, 4)
    path.bezier_curve_to(1, 2, 3, 4, 5, 6)
    path.arc_to(1, 2, 3, 4, 5)
    assert len(path) == 0


def test_arc_to_parallel_draws_straight_line():
    path = Path2D()
    path.move_to(0, 0)
    path.arc_to(10, 0, 20, 0, 5)
    assert path.points[-1].pos == Vec(20, 0)
    assert len(path) == 2


def test_arc_to_corner_stays_on_circle():
    path = Path2D()
    path.move_to(0, 0)
    path.arc_to(10, 0, 10, 10, 2)
    arc_points = path.points[1:]
    assert len(arc_points) > 2
    for p in arc_points:
        assert math.hypot(p.pos.x - 8, p.pos.y - 2) == pytest.approx(2)


def test_self_intersection_is_flagged():
    path = _bent_path()
    assert _has(path.points, PathFlag.SELF_INTERSECTS) == [False, False, False, False, True]
    path.line_to(0, 20)
    assert _has(path.points[-1:], PathFlag.SELF_INTERSECTS) == [True]


def test_self_intersection_checks_can_be_disabled():
    path = _bent_path(performance=PerformanceSettings(ignore_self_intersections=True))
    assert _has(path.points, PathFlag.SELF_INTERSECTS) == [False] * 5
    other = _bent_path(no_self_intersection=True)
    assert _has(other.points, PathFlag.SELF_INTERSECTS) == [False] * 5


def test_assume_convex_marks_all_points_convex():
    path = _bent_path(performance=PerformanceSettings(assume_convex=True))
    assert _has(path.points, PathFlag.IS_CONVEX) == [True] * 5


def test_iter_sub_paths_splits_on_moves():
    path = Path2D()
    path.rect(0, 0, 10, 10)
    path.rect(20, 20, 5, 5)
    subs = list(iter_sub_paths(path.points))
    assert len(subs) == 2
    assert subs[1][0].pos == Vec(20, 20)


def test_iter_sub_paths_skips_short_sub_paths():
    path = Path2D()
    path.move_to(0, 0)
    path.line_to(5, 0)
    path.move_to(20, 20)
    path.line_to(30, 20)
    path.line_to(30, 30)
    subs = list(iter_sub_paths(path.points))
    assert len(subs) == 1
    assert subs[0][0].pos == Vec(20, 20)


def test_iter_sub_paths_close_appends_start_without_mutating():
    points = [
        PathPoint(Vec(0, 0), flags=PathFlag.MOVE | PathFlag.IS_CONVEX),
        PathPoint(Vec(10, 0)),
        PathPoint(Vec(10, 10)),
    ]
    (closed,) = iter_sub_paths(points, True)
    assert len(closed) == 4
    assert closed[-1].pos == points[0].pos
    assert closed[2].flags & PathFlag.ATTACH
    assert not points[2].flags & PathFlag.ATTACH