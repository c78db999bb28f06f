"""Path construction: lines, arcs, curves and point-in-path tests."""

from __future__ import annotations

import dataclasses
import enum
import math
from dataclasses import dataclass
from itertools import pairwise
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from .geometry import (
    SAME_POINT_TOLERANCE,
    Vec,
    _acos,
    is_same_point,
    line_intersection,
)

_TAU = math.pi * 2
_ARC_STEP = _TAU / 90
_CURVE_STEP = 0.01
_MERGE_DISTANCE = 0.1


class PathFlag(enum.IntFlag):
    MOVE = 1
    ATTACH = 2
    IS_RECT = 4
    IS_CONVEX = 8
    IS_CLOCKWISE = 16
    SELF_INTERSECTS = 32


@dataclass
class PathPoint:
    """A path vertex, the start of the next segment and its flags."""

    pos: Vec
    next: Vec = Vec()
    flags: PathFlag = PathFlag(0)


@dataclass
class PerformanceSettings:
    """Switches that trade correctness checks for speed."""

    assume_convex: bool = False
    ignore_self_intersections: bool = False


DEFAULT_PERFORMANCE = PerformanceSettings()


class FillRule(enum.Enum):
    NON_ZERO = "nonzero"
    EVEN_ODD = "evenodd"


def _point_is_right_of_line(a: Vec, b: Vec, p: Vec) -> Tuple[bool, bool]:
    if a[1] == b[1]:
        return False, False
    upward = False
    if a[1] > b[1]:
        a, b = b, a
        upward = True
    if p[1] < a[1] or p[1] >= b[1]:
        return False, False
    vx, vy = b[0] - a[0], b[1] - a[1]
    r = (p[1] - a[1]) / vy
    return p[0] > a[0] + r * vx, upward


def _end_angle(start: float, end: float, anticlockwise: bool) -> float:
    if not anticlockwise and end < start:
        end = start + (_TAU - math.fmod(start - end, _TAU))
    elif anticlockwise and end > start:
        end = start - (_TAU - math.fmod(end - start, _TAU))

    if not anticlockwise:
        diff = end - start
        if diff >= 2 * _TAU:
            end = start + math.fmod(diff, _TAU) + _TAU
    else:
        diff = start - end
        if diff >= 2 * _TAU:
            end = start - (math.fmod(diff, _TAU) + _TAU)
    return end


def _sweep(start: float, end: float, anticlockwise: bool) -> Iterator[float]:
    a = start
    if anticlockwise:
        while a > end:
            yield a
            a -= _ARC_STEP
    else:
        while a < end:
            yield a
            a += _ARC_STEP


class Path2D:
    """A sequence of sub paths built from lines, arcs and curves."""

    def __init__(
        self,
        *,
        performance: Optional[PerformanceSettings] = None,
        no_self_intersection: bool = False,
    ) -> None:
        self.points: List[PathPoint] = []
        self.performance = performance if performance is not None else DEFAULT_PERFORMANCE
        self.no_self_intersection = no_self_intersection
        self._move = Vec()
        self._cw_sum = 0.0

    def __len__(self) -> int:
        return len(self.points)

    def move_to(self, x: float, y: float) -> None:
        pos = Vec(x, y)
        if self.points and is_same_point(self.points[-1].pos, pos, _MERGE_DISTANCE):
            return
        self.points.append(PathPoint(pos, flags=PathFlag.MOVE | PathFlag.IS_CONVEX))
        self._cw_sum = 0.0
        self._move = pos

    def line_to(self, x: float, y: float) -> None:
        self._line_to(x, y, True)

    def _line_to(self, x: float, y: float, check_self_intersection: bool) -> None:
        pos = Vec(x, y)
        count = len(self.points)
        if count and is_same_point(self.points[-1].pos, pos, _MERGE_DISTANCE):
            return
        if count == 0:
            self.move_to(x, y)
            return

        prev = self.points[-1]
        prev.next = pos
        prev.flags |= PathFlag.ATTACH
        new = PathPoint(pos)
        self.points.append(new)
        perf = self.performance

        if prev.flags & PathFlag.IS_CONVEX:
            self._cw_sum += (x - prev.pos.x) * (y + prev.pos.y)
            total = self._cw_sum + (self._move.x - x) * (self._move.y + y)
            if total <= 0:
                new.flags |= PathFlag.IS_CLOCKWISE

        if len(self.points) < 4 or perf.assume_convex:
            new.flags |= PathFlag.IS_CONVEX
        elif prev.flags & PathFlag.IS_CONVEX:
            prev2 = self.points[count - 2]
            clockwise = bool(prev.flags & PathFlag.IS_CLOCKWISE)
            ln = prev.pos - prev2.pos
            dot = (pos - prev2.pos).dot(Vec(ln.y, -ln.x))
            if (clockwise and dot <= 0) or (not clockwise and dot >= 0):
                new.flags |= PathFlag.IS_CONVEX

        check = (
            check_self_intersection
            and not perf.ignore_self_intersections
            and not self.no_self_intersection
        )
        if prev.flags & PathFlag.SELF_INTERSECTS:
            new.flags |= PathFlag.SELF_INTERSECTS
        elif not new.flags & PathFlag.IS_CONVEX and check:
            cut = self._first_cut(prev.pos, pos, count)
            if cut is not None and not is_same_point(cut, pos, SAME_POINT_TOLERANCE):
                new.flags |= PathFlag.SELF_INTERSECTS

    def _first_cut(self, b0: Vec, b1: Vec, count: int) -> Optional[Vec]:
        for a, b in pairwise(self.points[:count]):
            point, r1, r2 = line_intersection(a.pos, b.pos, b0, b1)
            if 0 < r1 < 1 and 0 < r2 < 1:
                return point
        return None

    def _curve(
        self,
        start: float,
        end: float,
        anticlockwise: bool,
        point_at: Callable[[float], Tuple[float, float]],
    ) -> None:
        check = len(self.points) > 0
        last_was_move = not self.points or bool(self.points[-1].flags & PathFlag.MOVE)

        if end != start:
            end = _end_angle(start, end, anticlockwise)
            for angle in _sweep(start, end, anticlockwise):
                self._line_to(*point_at(angle), check)
        self._line_to(*point_at(end), check)

        if last_was_move:
            self.points[-1].flags |= PathFlag.IS_CONVEX

    def arc(
        self,
        x: float,
        y: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool = False,
    ) -> None:
        """Add a circle segment around (x, y), angles in radians."""

        def point_at(angle: float) -> Tuple[float, float]:
            return x + radius * math.cos(angle), y + radius * math.sin(angle)

        self._curve(start_angle, end_angle, anticlockwise, point_at)

    def arc_to(self, x1: float, y1: float, x2: float, y2: float, radius: float) -> None:
        """Add a rounded corner at (x1, y1) towards (x2, y2)."""
        if not self.points:
            return
        p0 = self.points[-1].pos
        p1, p2 = Vec(x1, y1), Vec(x2, y2)
        v0 = (p0 - p1).norm()
        v1 = (p2 - p1).norm()
        angle = _acos(v0.dot(v1))
        if angle <= 0 or angle >= math.pi:
            self.line_to(x2, y2)
            return
        cv0 = Vec(-v0.y, v0.x)
        cv1 = Vec(v1.y, -v1.x)
        x = ((cv1 - cv0) / (v0 - v1)).x * radius
        if x < 0:
            cv0, cv1 = -cv0, -cv1
        center = p1 + v0 * abs(x) + cv0 * radius
        a0, a1 = (-cv0).atan2(), (-cv1).atan2()
        if x > 0:
            if a1 - a0 > 0:
                a0 += _TAU
        elif a0 - a1 > 0:
            a1 += _TAU
        self.arc(center.x, center.y, radius, a0, a1, x > 0)

    def quadratic_curve_to(self, x1: float, y1: float, x2: float, y2: float) -> None:
        if not self.points:
            return
        p0 = self.points[-1].pos
        p1, p2 = Vec(x1, y1), Vec(x2, y2)
        v0, v1 = p1 - p0, p2 - p1
        r = 0.0
        while r < 1:
            i0 = v0 * r + p0
            i1 = v1 * r + p1
            self.line_to(*((i1 - i0) * r + i0))
            r += _CURVE_STEP
        self.line_to(x2, y2)

    def bezier_curve_to(
        self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float
    ) -> None:
        if not self.points:
            return
        p0 = self.points[-1].pos
        p1, p2, p3 = Vec(x1, y1), Vec(x2, y2), Vec(x3, y3)
        v0, v1, v2 = p1 - p0, p2 - p1, p3 - p2
        r = 0.0
        while r < 1:
            i0 = v0 * r + p0
            i1 = v1 * r + p1
            i2 = v2 * r + p2
            j0 = (i1 - i0) * r + i0
            j1 = (i2 - i1) * r + i1
            self.line_to(*((j1 - j0) * r + j0))
            r += _CURVE_STEP
        self.line_to(x3, y3)

    def ellipse(
        self,
        x: float,
        y: float,
        radius_x: float,
        radius_y: float,
        rotation: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool = False,
    ) -> None:
        """Add an ellipse segment rotated by ``rotation`` radians."""
        rs, rc = math.sin(rotation), math.cos(rotation)

        def point_at(angle: float) -> Tuple[float, float]:
            rx = radius_x * math.cos(angle)
            ry = radius_y * math.sin(angle)
            return x + rx * rc - ry * rs, y + rx * rs + ry * rc

        self._curve(start_angle, end_angle, anticlockwise, point_at)

    def close_path(self) -> None:
        """Close the current sub path back to its last move point."""
        if len(self.points) < 2:
            return
        close_pt = next(
            (p for p in reversed(self.points) if p.flags & PathFlag.MOVE),
            self.points[0],
        )
        if not is_same_point(self.points[-1].pos, self.points[0].pos, _MERGE_DISTANCE):
            self.line_to(close_pt.pos.x, close_pt.pos.y)
        last = self.points[-1]
        last.next = close_pt.next
        last.flags |= PathFlag.ATTACH

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        last_was_move = not self.points or bool(self.points[-1].flags & PathFlag.MOVE)
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.line_to(x, y)
        if last_was_move:
            self.points[-1].flags |= PathFlag.IS_RECT | PathFlag.IS_CONVEX

    def is_point_in_path(self, x: float, y: float, rule: FillRule = FillRule.NON_ZERO) -> bool:
        """Whether (x, y) lies inside the path under the given fill rule."""
        target = Vec(x, y)
        inside = False
        for sub in iter_sub_paths(self.points, False):
            winding = 0
            prev = sub[-1].pos
            for pt in sub:
                right, upward = _point_is_right_of_line(prev, pt.pos, target)
                prev = pt.pos
                if right:
                    winding += 1 if upward else -1
            if rule is FillRule.NON_ZERO:
                inside = winding != 0
            else:
                inside = winding % 2 == 0
            if inside:
                break
        return inside


def _sub_path(points: Sequence[PathPoint], close: bool) -> List[PathPoint]:
    if not close or points[0].pos == points[-1].pos:
        return list(points)
    closed = Path2D()
    closed.points = [dataclasses.replace(p) for p in points]
    closed._move = points[0].pos
    closed._line_to(points[0].pos.x, points[0].pos.y, True)
    return closed.points


def iter_sub_paths(points: Sequence[PathPoint], close: bool = False) -> Iterator[List[PathPoint]]:
    """Yield each sub path of at least three points, closed if requested."""
    start = 0
    for i, pt in enumerate(points):
        if not pt.flags & PathFlag.MOVE:
            continue
        if i >= start + 3:
            yield _sub_path(points[start:i], close)
        start = i
    if len(points) >= start + 3:
        yield _sub_path(points[start:], close)