"""Stroke triangulation: line segments, caps, joins and dashes."""

from __future__ import annotations

import dataclasses
import enum
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .geometry import Mat, Vec, line_intersection
from .path2d import Path2D, PathFlag, PathPoint
from .triangulation import triangle_contains_point

_TAU = math.pi * 2
_JOINT_EPSILON_SQR = 0.000000001


class LineCap(enum.Enum):
    BUTT = "butt"
    SQUARE = "square"
    ROUND = "round"


class LineJoin(enum.Enum):
    MITER = "miter"
    BEVEL = "bevel"
    ROUND = "round"


@dataclass
class StrokeStyle:
    """Line width, caps, joins and dash pattern used when stroking."""

    line_width: float = 1.0
    line_cap: LineCap = LineCap.BUTT
    line_join: LineJoin = LineJoin.MITER
    miter_limit: float = 10.0
    line_dash: Sequence[float] = ()
    line_dash_offset: float = 0.0
    line_dash_point: int = 0

    @property
    def miter_limit_sqr(self) -> float:
        return self.miter_limit * self.miter_limit


def apply_line_dash(points: Sequence[PathPoint], style: StrokeStyle) -> Sequence[PathPoint]:
    """Split the path into dashes; returns the input when no dash applies."""
    dash = list(style.line_dash)
    if len(dash) < 2 or len(points) < 2:
        return points

    offset = style.line_dash_offset
    index = style.line_dash_point
    result: List[PathPoint] = []

    last_pos = Vec()
    for i, pp in enumerate(points):
        if i == 0 or pp.flags & PathFlag.MOVE:
            result.append(dataclasses.replace(pp))
            last_pos = pp.pos
            continue

        v = pp.pos - last_pos
        remaining = v.length()
        prev = offset
        while remaining > 0:
            draw = index % 2 == 0
            new_pos = pp.pos
            offset += remaining
            if offset > dash[index]:
                offset = 0.0
                dl = dash[index] - prev
                new_pos = last_pos + v * (dl / remaining)
                remaining -= dl
                index = (index + 1) % len(dash)
                prev = 0.0
            else:
                remaining = 0

            if draw:
                result[-1].next = new_pos
                result[-1].flags |= PathFlag.ATTACH
                result.append(PathPoint(new_pos))
            else:
                result.append(PathPoint(new_pos, flags=PathFlag.MOVE))

            last_pos = new_pos
            v = pp.pos - last_pos
        last_pos = pp.pos

    return result


def add_circle_tris(center: Vec, radius: float, mat: Optional[Mat] = None) -> List[Vec]:
    """Triangle fan approximating a filled circle."""
    if mat is None:
        mat = Mat.identity()
    center = Vec(*center)
    step = 6 / radius if radius != 0 else math.inf
    step = min(max(step, 0.05), 0.8)

    center_tf = center.mul_mat(mat)
    p0 = Vec(center.x, center.y + radius).mul_mat(mat)
    tris: List[Vec] = []
    angle = step
    while angle <= _TAU + step:
        p1 = Vec(
            center.x + math.sin(angle) * radius,
            center.y + math.cos(angle) * radius,
        ).mul_mat(mat)
        tris.extend((center_tf, p0, p1))
        p0 = p1
        angle += step
    return tris


def _bevel(p1: Vec, l0p1: Vec, l0p3: Vec, v3: Vec, mat: Mat) -> List[Vec]:
    l1p1 = p1 - v3
    l1p3 = p1 + v3
    return [
        p.mul_mat(mat) for p in (p1, l0p1, l1p1, p1, l1p3, l0p3)
    ]


def line_joint(
    p0: Vec,
    p1: Vec,
    p2: Vec,
    l0p0: Vec,
    l0p1: Vec,
    l0p2: Vec,
    l0p3: Vec,
    style: StrokeStyle,
    mat: Optional[Mat] = None,
) -> List[Vec]:
    """Triangles that fill the join at ``p1`` between segments p0-p1 and p1-p2."""
    if mat is None:
        mat = Mat.identity()
    p1, p2 = Vec(*p1), Vec(*p2)
    l0p0, l0p1, l0p2, l0p3 = Vec(*l0p0), Vec(*l0p1), Vec(*l0p2), Vec(*l0p3)
    half = style.line_width * 0.5
    v2 = (p1 - p2).norm()
    v3 = Vec(v2.y, -v2.x) * half

    if style.line_join is LineJoin.MITER:
        l1p0 = p2 - v3
        l1p1 = p1 - v3
        l1p2 = p2 + v3
        l1p3 = p1 + v3
        limit = style.miter_limit_sqr

        if (l0p1 - l1p1).length_sqr() < _JOINT_EPSILON_SQR:
            ip0 = (l0p1 - l1p1) * 0.5 + l1p1
        else:
            ip0, _, q = line_intersection(l0p0, l0p1, l1p1, l1p0)
            if q >= 1:
                ip0 = (l0p1 + l1p1) * 0.5
        if (ip0 - l0p1).length_sqr() > limit:
            return _bevel(p1, l0p1, l0p3, v3, mat)

        if (l0p3 - l1p3).length_sqr() < _JOINT_EPSILON_SQR:
            ip1 = (l0p3 - l1p3) * 0.5 + l1p3
        else:
            ip1, _, q = line_intersection(l0p2, l0p3, l1p3, l1p2)
            if q >= 1:
                ip1 = (l0p3 + l1p3) * 0.5
        if (ip1 - l1p1).length_sqr() > limit:
            return _bevel(p1, l0p1, l0p3, v3, mat)

        return [
            p.mul_mat(mat)
            for p in (
                p1, l0p1, ip0,
                p1, ip0, l1p1,
                p1, l1p3, ip1,
                p1, ip1, l0p3,
            )
        ]
    if style.line_join is LineJoin.BEVEL:
        return _bevel(p1, l0p1, l0p3, v3, mat)
    return add_circle_tris(p1, half, mat)


def stroke_triangles(
    points: Sequence[PathPoint],
    style: StrokeStyle,
    mat: Optional[Mat] = None,
    inverse: Optional[Mat] = None,
) -> List[Vec]:
    """Triangles covering the stroke of the path.

    If ``inverse`` is given the points are first mapped through it, so a path
    stored in transformed coordinates is stroked in its own space and then
    mapped by ``mat``.
    """
    if mat is None:
        mat = Mat.identity()
    if not points:
        return []
    if inverse is not None:
        points = [
            dataclasses.replace(pt, pos=pt.pos.mul_mat(inverse), next=pt.next.mul_mat(inverse))
            for pt in points
        ]

    half = style.line_width * 0.5
    tris: List[Vec] = []
    start = True
    p0 = Vec()
    for p in apply_line_dash(points, style):
        if p.flags & PathFlag.MOVE:
            p0 = p.pos
            start = True
            continue
        p1 = p.pos

        v0 = (p1 - p0).norm()
        v1 = Vec(v0.y, -v0.x) * half
        v0 = v0 * half

        lp0 = p0 + v1
        lp1 = p1 + v1
        lp2 = p0 - v1
        lp3 = p1 - v1

        if start:
            if style.line_cap is LineCap.SQUARE:
                lp0 = lp0 - v0
                lp2 = lp2 - v0
            elif style.line_cap is LineCap.ROUND:
                tris.extend(add_circle_tris(p0, half, mat))

        if not p.flags & PathFlag.ATTACH:
            if style.line_cap is LineCap.SQUARE:
                lp1 = lp1 + v0
                lp3 = lp3 + v0
            elif style.line_cap is LineCap.ROUND:
                tris.extend(add_circle_tris(p1, half, mat))

        tris.extend(q.mul_mat(mat) for q in (lp0, lp1, lp3, lp0, lp3, lp2))

        if p.flags & PathFlag.ATTACH and style.line_width > 1:
            tris.extend(line_joint(p0, p1, p.next, lp0, lp1, lp2, lp3, style, mat))

        p0 = p1
        start = False

    return tris


def stroke_rect_points(x: float, y: float, w: float, h: float) -> List[PathPoint]:
    """A closed rectangle outline ready for stroking."""
    v0 = Vec(x, y)
    v1 = Vec(x + w, y)
    v2 = Vec(x + w, y + h)
    v3 = Vec(x, y + h)
    return [
        PathPoint(v0, v1, PathFlag.MOVE | PathFlag.ATTACH),
        PathPoint(v1, v2, PathFlag.ATTACH),
        PathPoint(v2, v3, PathFlag.ATTACH),
        PathPoint(v3, v0, PathFlag.ATTACH),
        PathPoint(v0, v1, PathFlag.ATTACH),
    ]


def is_point_in_stroke(
    path: Path2D, x: float, y: float, style: StrokeStyle, mat: Optional[Mat] = None
) -> bool:
    """Whether (x, y) lies within the stroke of ``path``."""
    if not path.points:
        return False
    tris = stroke_triangles(path.points, style, mat)
    pt = Vec(x, y)
    return any(
        triangle_contains_point(tris[i], tris[i + 1], tris[i + 2], pt)
        for i in range(0, len(tris) - 2, 3)
    )