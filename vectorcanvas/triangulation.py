"""Fill triangulation of paths, including self-intersecting ones.

Simple polygons are cut into triangles by ear clipping. A self-intersecting
sub path is first cut at its intersections into a network of vertices and
edges. Each edge records which of its sides lies inside the path. The
boundary is then traced along the inside sides into separate simple parts,
which are triangulated one by one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from .geometry import (
    SAME_POINT_TOLERANCE,
    Mat,
    Vec,
    is_same_point,
    line_intersection,
    line_point_dist_sqr,
)
from .path2d import PathFlag, PathPoint, iter_sub_paths

PARALLEL_TOLERANCE = 1e-10
ON_LINE_TOLERANCE_SQR = 1e-20
_SMALLEST_FLOAT = math.ulp(0.0)
_TAU = math.pi * 2


def point_is_right_of_line(a, b, p) -> Tuple[bool, bool]:
    """Whether ``p`` lies right of the edge a-b within its vertical span.

    The second value tells whether the edge points upwards (a below b in
    value order was swapped), which gives the winding direction.
    """
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


def triangle_contains_point(a, b, c, p) -> bool:
    """Whether ``p`` lies inside the triangle a, b, c."""
    xs = (a[0], b[0], c[0])
    ys = (a[1], b[1], c[1])
    if p[0] < min(xs) or p[0] > max(xs) or p[1] < min(ys) or p[1] > max(ys):
        return False
    count = sum(
        1
        for start, end in ((a, b), (b, c), (c, a))
        if point_is_right_of_line(start, end, p)[0]
    )
    return count == 1


def parallel(a1, b1, a2, b2) -> bool:
    """Whether the lines a1-b1 and a2-b2 are parallel or anti-parallel."""
    angle = (Vec(*b1) - a1).angle_to(Vec(*b2) - a2)
    return abs(angle) < PARALLEL_TOLERANCE or abs(angle - math.pi) < PARALLEL_TOLERANCE


def polygon_contains_line(polygon: Sequence[Vec], ia: int, ib: int, a, b) -> bool:
    """Whether the segment a-b (between vertices ia and ib) crosses no edge."""
    count = len(polygon)
    for i, start in enumerate(polygon):
        if i in (ia, ib):
            continue
        i2 = (i + 1) % count
        if i2 in (ia, ib):
            continue
        _, p, q = line_intersection(start, polygon[i2], a, b)
        if 0 <= p <= 1 and 0 <= q <= 1:
            return False
    return True


def polygon_contains_point(polygon: Sequence[Vec], p) -> bool:
    """Even-odd test; points on an edge count as inside."""
    a = polygon[-1]
    count = 0
    for b in polygon:
        if point_is_right_of_line(a, b, p)[0]:
            count += 1
        if line_point_dist_sqr(a, b, p) < ON_LINE_TOLERANCE_SQR:
            return True
        a = b
    return count % 2 == 1


def triangulate_path(path: Sequence[PathPoint], mat: Optional[Mat] = None) -> List[Vec]:
    """Ear-clip a simple closed path; returns three points per triangle."""
    if mat is None:
        mat = Mat.identity()
    if path and path[0].pos == path[-1].pos:
        path = path[:-1]
    polygon = [pt.pos.mul_mat(mat) for pt in path]
    if len(polygon) < 3:
        raise ValueError("a path needs at least three distinct points to triangulate")

    tris: List[Vec] = []
    while len(polygon) > 3:
        count = len(polygon)
        i = 0
        for i, a in enumerate(polygon):
            ic = (i + 2) % count
            b = polygon[(i + 1) % count]
            c = polygon[ic]
            if is_same_point(a, c, _SMALLEST_FLOAT):
                break
            if not polygon_contains_point(polygon, (a + c) / 2):
                continue
            if not polygon_contains_line(polygon, i, ic, a, c):
                continue
            if parallel(a, b, b, c):
                continue
            tris.extend((a, b, c))
            break
        del polygon[(i + 1) % count]
    tris.extend(polygon[:3])
    return tris


@dataclass
class TessVert:
    """A vertex of the cut network and the indices of its edges."""

    pos: Vec
    attached: List[int] = field(default_factory=list)
    count: int = 0


@dataclass
class TessEdge:
    """An edge between two vertices, with which of its sides is inside."""

    a: int
    b: int
    left_inside: bool = False
    right_inside: bool = False


@dataclass
class TessNet:
    """Vertices and edges of a path cut at its self intersections."""

    verts: List[TessVert] = field(default_factory=list)
    edges: List[TessEdge] = field(default_factory=list)


@dataclass
class _Cut:
    start: int
    to: int
    ratio: float
    point: Vec


def cut_intersections(path: Sequence[PathPoint]) -> TessNet:
    """Build the vertex/edge network of a path split at its crossings.

    Returns an empty network if the path does not cross itself.
    """
    points = list(path)
    i = 0
    while i < len(points):
        nxt = points[(i + 1) % len(points)]
        if is_same_point(points[i].pos, nxt.pos, SAME_POINT_TOLERANCE):
            del points[i]
            continue
        i += 1

    n = len(points)
    cuts: List[_Cut] = []
    ip = n - 1
    for i in range(n):
        a0, a1 = points[ip].pos, points[i].pos
        for j in range(i + 1, n):
            jp = (j + n - 1) % n
            if ip == j or jp == i:
                continue
            point, r1, r2 = line_intersection(a0, a1, points[jp].pos, points[j].pos)
            if r1 <= 0 or r1 >= 1 or r2 <= 0 or r2 >= 1:
                continue
            cuts.append(_Cut(ip, i, r1, point))
            cuts.append(_Cut(jp, j, r2, point))
        ip = i

    if not cuts:
        return TessNet()

    cuts.sort(key=lambda c: (c.to, c.ratio), reverse=True)

    verts = [TessVert(pt.pos, count=2) for pt in points]
    for cut in cuts:
        verts.insert(cut.to, TessVert(cut.point, count=verts[cut.to].count))
    edges = [TessEdge(i, (i + 1) % len(verts)) for i in range(len(verts))]

    i = 0
    while i < len(verts):
        j = i + 1
        while j < len(verts):
            if not is_same_point(verts[i].pos, verts[j].pos, SAME_POINT_TOLERANCE):
                j += 1
                continue
            del verts[j]
            for e in edges:
                if e.a == j:
                    e.a = i
                elif e.a > j:
                    e.a -= 1
                if e.b == j:
                    e.b = i
                elif e.b > j:
                    e.b -= 1
            verts[i].count += 2
        i += 1

    for i, vert in enumerate(verts):
        vert.attached = [k for k, e in enumerate(edges) if e.a == i or e.b == i]

    return TessNet(verts=verts, edges=edges)


def _crossings(net: TessNet, skip: int, mid: Vec, axis: int) -> Tuple[int, int]:
    """Count edges on either side of ``mid``, scanning across ``axis``."""
    other = 1 - axis
    left = right = 0
    for j, e in enumerate(net.edges):
        if j == skip:
            continue
        a2, b2 = net.verts[e.a].pos, net.verts[e.b].pos
        if a2[axis] == b2[axis]:
            continue
        if a2[axis] > b2[axis]:
            a2, b2 = b2, a2
        if mid[axis] < a2[axis] or mid[axis] > b2[axis]:
            continue
        r = (mid[axis] - a2[axis]) / (b2[axis] - a2[axis])
        cross = a2[other] + r * (b2[other] - a2[other])
        if mid[other] > cross:
            left += 1
        elif mid[other] < cross:
            right += 1
    return left, right


def set_path_left_right_inside(net: TessNet) -> None:
    """Mark, for each edge, whether its left and right sides are inside."""
    for i, edge in enumerate(net.edges):
        a1, b1 = net.verts[edge.a].pos, net.verts[edge.b].pos
        diff = b1 - a1
        mid = a1 + diff * 0.5

        if abs(diff.y) > abs(diff.x):
            left, right = _crossings(net, i, mid, 1)
            if diff.y > 0:
                left, right = right, left
        else:
            left, right = _crossings(net, i, mid, 0)
            if diff.x < 0:
                left, right = right, left

        edge.left_inside = left % 2 == 1
        edge.right_inside = right % 2 == 1


def _trace_part(net: TessNet) -> Optional[List[PathPoint]]:
    """Follow one inside boundary through the network, clearing its sides."""
    for index, e in enumerate(net.edges):
        if e.left_inside != e.right_inside:
            break
    else:
        return None

    start, came_from, cur = e.a, index, e.b
    left = e.left_inside
    if left:
        e.left_inside = False
    else:
        e.right_inside = False

    part = [PathPoint(net.verts[cur].pos, flags=PathFlag.MOVE)]
    for _ in range(len(net.edges)):
        ecur = net.edges[came_from]
        direction = net.verts[ecur.b].pos - net.verts[ecur.a].pos
        dir_angle = math.atan2(direction.y, direction.x)
        min_diff = _TAU
        chosen: Optional[Tuple[int, int]] = None
        for ei in net.verts[cur].attached:
            if ei == came_from:
                continue
            cand = net.edges[ei]
            if (left and not cand.left_inside) or (not left and not cand.right_inside):
                continue
            na, nb = net.verts[cand.a], net.verts[cand.b]
            if cand.b == cur:
                na, nb = nb, na
            ndir = nb.pos - na.pos
            next_angle = math.atan2(ndir.y, ndir.x) + math.pi
            if next_angle < dir_angle:
                next_angle += _TAU
            elif next_angle > dir_angle + _TAU:
                next_angle -= _TAU
            angle_diff = next_angle - dir_angle if left else dir_angle - next_angle
            if angle_diff < min_diff:
                min_diff = angle_diff
                chosen = (ei, cand.b if cand.a == cur else cand.a)
        if chosen is None:
            break
        next_edge, nxt = chosen
        if left:
            net.edges[next_edge].left_inside = False
        else:
            net.edges[next_edge].right_inside = False
        part.append(PathPoint(net.verts[nxt].pos))
        came_from, cur = next_edge, nxt
        if nxt == start:
            break
    return part


def self_intersecting_path_parts(points: Sequence[PathPoint]) -> Iterator[List[PathPoint]]:
    """Yield simple, non-crossing parts that together cover the path's fill."""
    for sub in iter_sub_paths(points, False):
        net = cut_intersections(sub)
        if not net.verts:
            yield sub
            continue
        set_path_left_right_inside(net)
        while True:
            part = _trace_part(net)
            if part is None:
                break
            if len(part) >= 3:
                yield part


def sub_path_triangles(path: Sequence[PathPoint], mat: Optional[Mat] = None) -> List[Vec]:
    """Triangulate one closed sub path using the cheapest suitable method."""
    if mat is None:
        mat = Mat.identity()
    last = path[-1]
    tris: List[Vec] = []
    if last.flags & PathFlag.IS_CONVEX:
        p0 = path[0].pos.mul_mat(mat)
        p1 = path[1].pos.mul_mat(mat)
        end = len(path) - 1 if path[0].pos == last.pos else len(path)
        for pt in path[2:end]:
            p2 = pt.pos.mul_mat(mat)
            tris.extend((p0, p1, p2))
            p1 = p2
    elif last.flags & PathFlag.SELF_INTERSECTS:
        for part in self_intersecting_path_parts(path):
            tris.extend(triangulate_path(part, mat))
    else:
        tris.extend(triangulate_path(path, mat))
    return tris


def fill_triangles(points: Sequence[PathPoint], mat: Optional[Mat] = None) -> List[Vec]:
    """Triangles covering the fill of every sub path, each closed first."""
    if len(points) < 3:
        return []
    tris: List[Vec] = []
    for sub in iter_sub_paths(points, True):
        tris.extend(sub_path_triangles(sub, mat))
    return tris