"""Polygon triangulation by ear clipping, with support for holes.

Polygons are given as a list of rings. The first ring is the outer
boundary, any further rings are holes. Each ring is a sequence of
``(x, y)`` points. The result is a flat list of vertex indices, three per
triangle, where vertices are numbered consecutively across all rings.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

Point = Sequence[float]

_HASH_THRESHOLD = 80


class _Node:
    """A vertex in a circular doubly linked polygon ring."""

    __slots__ = ("i", "x", "y", "prev", "next", "z", "prev_z", "next_z", "steiner")

    def __init__(self, i: int, x: float, y: float) -> None:
        self.i = i
        self.x = x
        self.y = y
        self.prev: Optional[_Node] = None
        self.next: Optional[_Node] = None
        self.z = 0
        self.prev_z: Optional[_Node] = None
        self.next_z: Optional[_Node] = None
        self.steiner = False


def _area(p: _Node, q: _Node, r: _Node) -> float:
    return (q.y - p.y) * (r.x - q.x) - (q.x - p.x) * (r.y - q.y)


def _equals(a: _Node, b: _Node) -> bool:
    return a.x == b.x and a.y == b.y


def _sign(value: float) -> int:
    if value < 0:
        return -1
    if value > 0:
        return 1
    return 0


def _point_in_triangle(ax, ay, bx, by, cx, cy, px, py) -> bool:
    return (
        (cx - px) * (ay - py) - (ax - px) * (cy - py) >= 0
        and (ax - px) * (by - py) - (bx - px) * (ay - py) >= 0
        and (bx - px) * (cy - py) - (cx - px) * (by - py) >= 0
    )


def _on_segment(p: _Node, q: _Node, r: _Node) -> bool:
    return (
        min(p.x, r.x) <= q.x <= max(p.x, r.x)
        and min(p.y, r.y) <= q.y <= max(p.y, r.y)
    )


def _intersects(p1: _Node, q1: _Node, p2: _Node, q2: _Node) -> bool:
    o1 = _sign(_area(p1, q1, p2))
    o2 = _sign(_area(p1, q1, q2))
    o3 = _sign(_area(p2, q2, p1))
    o4 = _sign(_area(p2, q2, q1))

    if o1 != o2 and o3 != o4:
        return True
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, q2, q1):
        return True
    if o3 == 0 and _on_segment(p2, p1, q2):
        return True
    if o4 == 0 and _on_segment(p2, q1, q2):
        return True
    return False


def _ring(start: _Node):
    """Yield each node of the ring once, beginning at ``start``."""
    p = start
    while True:
        yield p
        p = p.next
        if p is start:
            break


def _intersects_polygon(a: _Node, b: _Node) -> bool:
    return any(
        p.i != a.i
        and p.next.i != a.i
        and p.i != b.i
        and p.next.i != b.i
        and _intersects(p, p.next, a, b)
        for p in _ring(a)
    )


def _locally_inside(a: _Node, b: _Node) -> bool:
    if _area(a.prev, a, a.next) < 0:
        return _area(a, b, a.next) >= 0 and _area(a, a.prev, b) >= 0
    return _area(a, b, a.prev) < 0 or _area(a, a.next, b) < 0


def _middle_inside(a: _Node, b: _Node) -> bool:
    inside = False
    px = (a.x + b.x) / 2
    py = (a.y + b.y) / 2
    for p in _ring(a):
        if (
            (p.y > py) != (p.next.y > py)
            and p.next.y != p.y
            and px < (p.next.x - p.x) * (py - p.y) / (p.next.y - p.y) + p.x
        ):
            inside = not inside
    return inside


def _is_valid_diagonal(a: _Node, b: _Node) -> bool:
    if a.next.i == b.i or a.prev.i == b.i or _intersects_polygon(a, b):
        return False
    locally_visible = (
        _locally_inside(a, b)
        and _locally_inside(b, a)
        and _middle_inside(a, b)
        and (_area(a.prev, a, b.prev) != 0.0 or _area(a, b.prev, b) != 0.0)
    )
    zero_length = (
        _equals(a, b)
        and _area(a.prev, a, a.next) > 0
        and _area(b.prev, b, b.next) > 0
    )
    return locally_visible or zero_length


def _sector_contains_sector(m: _Node, p: _Node) -> bool:
    return _area(m.prev, m, p.prev) < 0 and _area(p.next, m, m.next) < 0


def _get_leftmost(start: _Node) -> _Node:
    leftmost = start
    for p in _ring(start):
        if p.x < leftmost.x or (p.x == leftmost.x and p.y < leftmost.y):
            leftmost = p
    return leftmost


def _remove_node(p: _Node) -> None:
    p.next.prev = p.prev
    p.prev.next = p.next
    if p.prev_z is not None:
        p.prev_z.next_z = p.next_z
    if p.next_z is not None:
        p.next_z.prev_z = p.prev_z


def _split_polygon(a: _Node, b: _Node) -> _Node:
    a2 = _Node(a.i, a.x, a.y)
    b2 = _Node(b.i, b.x, b.y)
    an = a.next
    bp = b.prev

    a.next = b
    b.prev = a

    a2.next = an
    an.prev = a2

    b2.next = a2
    a2.prev = b2

    bp.next = b2
    b2.prev = bp

    return b2


def _insert_node(i: int, pt: Point, last: Optional[_Node]) -> _Node:
    p = _Node(i, pt[0], pt[1])
    if last is None:
        p.prev = p
        p.next = p
    else:
        p.next = last.next
        p.prev = last
        last.next.prev = p
        last.next = p
    return p


def _filter_points(start: _Node, end: Optional[_Node] = None) -> _Node:
    """Remove collinear and duplicate points from the ring."""
    if end is None:
        end = start
    p = start
    while True:
        again = False
        if not p.steiner and (_equals(p, p.next) or _area(p.prev, p, p.next) == 0):
            _remove_node(p)
            p = end = p.prev
            if p is p.next:
                break
            again = True
        else:
            p = p.next
        if not again and p is end:
            break
    return end


def _sort_linked(head: _Node) -> _Node:
    """Merge sort of the z-order list (Tatham's linked list sort)."""
    in_size = 1
    while True:
        p: Optional[_Node] = head
        head = None
        tail: Optional[_Node] = None
        num_merges = 0

        while p is not None:
            num_merges += 1
            q = p
            p_size = 0
            for _ in range(in_size):
                p_size += 1
                q = q.next_z
                if q is None:
                    break
            q_size = in_size

            while p_size > 0 or (q_size > 0 and q is not None):
                if p_size == 0:
                    e = q
                    q = q.next_z
                    q_size -= 1
                elif q_size == 0 or q is None:
                    e = p
                    p = p.next_z
                    p_size -= 1
                elif p.z <= q.z:
                    e = p
                    p = p.next_z
                    p_size -= 1
                else:
                    e = q
                    q = q.next_z
                    q_size -= 1

                if tail is not None:
                    tail.next_z = e
                else:
                    head = e
                e.prev_z = tail
                tail = e

            p = q

        tail.next_z = None
        if num_merges <= 1:
            return head
        in_size *= 2


class Earcut:
    """Ear clipping triangulator; ``run`` returns triangle vertex indices."""

    def __init__(self) -> None:
        self.indices: List[int] = []
        self.vertices = 0
        self.hashing = False
        self.min_x = 0.0
        self.min_y = 0.0
        self.inv_size = 0.0

    def run(self, polygons: Sequence[Sequence[Point]]) -> List[int]:
        """Triangulate an outer ring followed by hole rings."""
        self.indices = []
        self.vertices = 0
        self.hashing = False
        if not polygons:
            return self.indices

        threshold = _HASH_THRESHOLD
        for ring in polygons:
            if threshold < 0:
                break
            threshold -= len(ring)

        outer = self._linked_list(polygons[0], True)
        if outer is None or outer.prev is outer.next:
            return self.indices

        if len(polygons) > 1:
            outer = self._eliminate_holes(polygons, outer)

        self.hashing = threshold < 0
        if self.hashing:
            min_x = max_x = outer.x
            min_y = max_y = outer.y
            for p in _ring(outer):
                min_x = min(min_x, p.x)
                min_y = min(min_y, p.y)
                max_x = max(max_x, p.x)
                max_y = max(max_y, p.y)
            self.min_x = min_x
            self.min_y = min_y
            size = max(max_x - min_x, max_y - min_y)
            self.inv_size = 1 / size if size != 0 else 0.0

        self._earcut_linked(outer, 0)
        return self.indices

    def _linked_list(self, points: Sequence[Point], clockwise: bool) -> Optional[_Node]:
        total = 0.0
        prev_pt = points[-1] if points else None
        for pt in points:
            total += (prev_pt[0] - pt[0]) * (pt[1] + prev_pt[1])
            prev_pt = pt

        last: Optional[_Node] = None
        numbered = list(enumerate(points, start=self.vertices))
        if clockwise != (total > 0):
            numbered.reverse()
        for i, pt in numbered:
            last = _insert_node(i, pt, last)

        if last is not None and _equals(last, last.next):
            _remove_node(last)
            last = last.next

        self.vertices += len(points)
        return last

    def _earcut_linked(self, ear: Optional[_Node], pass_no: int) -> None:
        if ear is None:
            return
        if pass_no == 0 and self.hashing:
            self._index_curve(ear)

        stop = ear
        while ear.prev is not ear.next:
            prev = ear.prev
            nxt = ear.next

            is_ear = self._is_ear_hashed(ear) if self.hashing else self._is_ear(ear)
            if is_ear:
                self.indices.extend((prev.i, ear.i, nxt.i))
                _remove_node(ear)
                ear = stop = nxt.next
                continue

            ear = nxt
            if ear is stop:
                if pass_no == 0:
                    self._earcut_linked(_filter_points(ear), 1)
                elif pass_no == 1:
                    ear = self._cure_local_intersections(_filter_points(ear))
                    self._earcut_linked(ear, 2)
                elif pass_no == 2:
                    self._split_earcut(ear)
                break

    @staticmethod
    def _is_ear(ear: _Node) -> bool:
        a, b, c = ear.prev, ear, ear.next
        if _area(a, b, c) >= 0:
            return False
        p = ear.next.next
        while p is not ear.prev:
            if _point_in_triangle(a.x, a.y, b.x, b.y, c.x, c.y, p.x, p.y) and _area(
                p.prev, p, p.next
            ) >= 0:
                return False
            p = p.next
        return True

    def _is_ear_hashed(self, ear: _Node) -> bool:
        a, b, c = ear.prev, ear, ear.next
        if _area(a, b, c) >= 0:
            return False

        min_z = self._z_order(min(a.x, b.x, c.x), min(a.y, b.y, c.y))
        max_z = self._z_order(max(a.x, b.x, c.x), max(a.y, b.y, c.y))

        def blocks(p: _Node) -> bool:
            return (
                p is not ear.prev
                and p is not ear.next
                and _point_in_triangle(a.x, a.y, b.x, b.y, c.x, c.y, p.x, p.y)
                and _area(p.prev, p, p.next) >= 0
            )

        p = ear.next_z
        while p is not None and p.z <= max_z:
            if blocks(p):
                return False
            p = p.next_z

        p = ear.prev_z
        while p is not None and p.z >= min_z:
            if blocks(p):
                return False
            p = p.prev_z

        return True

    def _cure_local_intersections(self, start: _Node) -> _Node:
        p = start
        while True:
            a = p.prev
            b = p.next.next
            if (
                not _equals(a, b)
                and _intersects(a, p, p.next, b)
                and _locally_inside(a, b)
                and _locally_inside(b, a)
            ):
                self.indices.extend((a.i, p.i, b.i))
                _remove_node(p)
                _remove_node(p.next)
                p = start = b
            p = p.next
            if p is start:
                break
        return _filter_points(p)

    def _split_earcut(self, start: _Node) -> None:
        a = start
        while True:
            b = a.next.next
            while b is not a.prev:
                if a.i != b.i and _is_valid_diagonal(a, b):
                    c = _split_polygon(a, b)
                    a = _filter_points(a, a.next)
                    c = _filter_points(c, c.next)
                    self._earcut_linked(a, 0)
                    self._earcut_linked(c, 0)
                    return
                b = b.next
            a = a.next
            if a is start:
                break

    def _eliminate_holes(self, polygons: Sequence[Sequence[Point]], outer: _Node) -> _Node:
        queue: List[_Node] = []
        for ring in polygons[1:]:
            head = self._linked_list(ring, False)
            if head is not None:
                if head is head.next:
                    head.steiner = True
                queue.append(_get_leftmost(head))
        queue.sort(key=lambda n: n.x)

        for hole in queue:
            self._eliminate_hole(hole, outer)
            outer = _filter_points(outer, outer.next)
        return outer

    @staticmethod
    def _eliminate_hole(hole: _Node, outer: _Node) -> None:
        bridge = Earcut._find_hole_bridge(hole, outer)
        if bridge is not None:
            b = _split_polygon(bridge, hole)
            _filter_points(bridge, bridge.next)
            _filter_points(b, b.next)

    @staticmethod
    def _find_hole_bridge(hole: _Node, outer: _Node) -> Optional[_Node]:
        hx, hy = hole.x, hole.y
        qx = -math.inf
        m: Optional[_Node] = None

        for p in _ring(outer):
            if hy <= p.y and hy >= p.next.y and p.next.y != p.y:
                x = p.x + (hy - p.y) * (p.next.x - p.x) / (p.next.y - p.y)
                if qx < x <= hx:
                    qx = x
                    if x == hx:
                        if hy == p.y:
                            return p
                        if hy == p.next.y:
                            return p.next
                    m = p if p.x < p.next.x else p.next

        if m is None:
            return None
        if hx == qx:
            return m

        stop = m
        tan_min = math.inf
        mx, my = m.x, m.y
        if hy < my:
            pt1, pt2 = hx, qx
        else:
            pt1, pt2 = qx, hx

        for p in _ring(stop):
            if (
                hx >= p.x >= mx
                and hx != p.x
                and _point_in_triangle(pt1, hy, mx, my, pt2, hy, p.x, p.y)
            ):
                tan_cur = abs(hy - p.y) / (hx - p.x)
                if _locally_inside(p, hole) and (
                    tan_cur < tan_min
                    or (
                        tan_cur == tan_min
                        and (p.x > m.x or _sector_contains_sector(m, p))
                    )
                ):
                    m = p
                    tan_min = tan_cur

        return m

    def _index_curve(self, start: _Node) -> None:
        for p in _ring(start):
            if p.z <= 0:
                p.z = self._z_order(p.x, p.y)
            p.prev_z = p.prev
            p.next_z = p.next

        start.prev_z.next_z = None
        start.prev_z = None
        _sort_linked(start)

    def _z_order(self, x: float, y: float) -> int:
        x2 = int(32767.0 * (x - self.min_x) * self.inv_size)
        y2 = int(32767.0 * (y - self.min_y) * self.inv_size)

        x2 = (x2 | (x2 << 8)) & 0x00FF00FF
        x2 = (x2 | (x2 << 4)) & 0x0F0F0F0F
        x2 = (x2 | (x2 << 2)) & 0x33333333
        x2 = (x2 | (x2 << 1)) & 0x55555555

        y2 = (y2 | (y2 << 8)) & 0x00FF00FF
        y2 = (y2 | (y2 << 4)) & 0x0F0F0F0F
        y2 = (y2 | (y2 << 2)) & 0x33333333
        y2 = (y2 | (y2 << 1)) & 0x55555555

        return x2 | (y2 << 1)


def earcut(polygons: Sequence[Sequence[Point]]) -> List[int]:
    """Triangulate ``polygons`` (outer ring, then holes) into vertex indices."""
    return Earcut().run(polygons)


def sort_font_contours(contours: Sequence[Sequence[Point]]) -> List[List[int]]:
    """Group glyph contours into outlines with their holes.

    A contour whose first point, cast as a ray to the right, crosses other
    contours an even number of times is an outer contour; otherwise it is a
    hole. The result holds one list per outer contour: its index followed by
    the indices of the holes whose oddly-crossed contour is that outer one.
    """
    cuts: List[dict] = [{} for _ in contours]
    cut_totals = [0] * len(contours)

    for i, first in enumerate(contours):
        pt = first[0]
        for j, other in enumerate(contours):
            if i == j:
                continue
            count = len(other)
            for k, a in enumerate(other):
                b = other[(k + 1) % count]
                if tuple(a) == tuple(b):
                    continue
                min_y = min(a[1], b[1])
                max_y = max(a[1], b[1])
                if pt[1] <= min_y or pt[1] > max_y:
                    continue
                r = (pt[1] - a[1]) / (b[1] - a[1])
                x = (b[0] - a[0]) * r + a[0]
                if x <= pt[0]:
                    continue
                cuts[i][j] = cuts[i].get(j, 0) + 1
                cut_totals[i] += 1

    outer = [total % 2 == 0 for total in cut_totals]

    result: List[List[int]] = []
    for i, is_outer in enumerate(outer):
        if not is_outer:
            continue
        group = [i]
        group.extend(
            j
            for j, j_outer in enumerate(outer)
            if not j_outer and cuts[j].get(i, 0) % 2 == 1
        )
        result.append(group)
    return result