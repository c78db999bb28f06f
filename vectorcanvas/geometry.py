"""Two-dimensional vectors, affine matrices and basic line geometry."""

from __future__ import annotations

import math
from typing import NamedTuple, Tuple, Union

SAME_POINT_TOLERANCE = 1e-20


def _fdiv(a: float, b: float) -> float:
    """Divide with IEEE semantics: division by zero gives inf or nan."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _acos(value: float) -> float:
    """Arc cosine that yields nan outside [-1, 1] instead of raising."""
    if math.isnan(value) or value < -1.0 or value > 1.0:
        return math.nan
    return math.acos(value)


class Vec(NamedTuple):
    """An immutable 2D vector supporting arithmetic operators."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other) -> "Vec":  # type: ignore[override]
        return Vec(self.x + other[0], self.y + other[1])

    def __sub__(self, other) -> "Vec":
        return Vec(self.x - other[0], self.y - other[1])

    def __mul__(self, factor: float) -> "Vec":  # type: ignore[override]
        return Vec(self.x * factor, self.y * factor)

    __rmul__ = __mul__  # type: ignore[assignment]

    def __truediv__(self, other: Union[float, Tuple[float, float]]) -> "Vec":
        if isinstance(other, tuple):
            return Vec(_fdiv(self.x, other[0]), _fdiv(self.y, other[1]))
        return Vec(_fdiv(self.x, other), _fdiv(self.y, other))

    def __neg__(self) -> "Vec":
        return Vec(-self.x, -self.y)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def length_sqr(self) -> float:
        return self.x * self.x + self.y * self.y

    def norm(self) -> "Vec":
        """Unit vector in the same direction (nan components for zero length)."""
        return self / self.length()

    def dot(self, other) -> float:
        return self.x * other[0] + self.y * other[1]

    def angle_to(self, other: "Vec") -> float:
        """Unsigned angle between the two vectors in radians."""
        return _acos(self.norm().dot(Vec(*other).norm()))

    def atan2(self) -> float:
        return math.atan2(self.y, self.x)

    def mul_mat(self, mat: "Mat") -> "Vec":
        """Apply an affine transformation matrix to this point."""
        return Vec(
            self.x * mat[0] + self.y * mat[2] + mat[4],
            self.x * mat[1] + self.y * mat[3] + mat[5],
        )


class Mat(NamedTuple):
    """A 2D affine matrix stored as (a, b, c, d, e, f).

    A point (x, y) maps to (x*a + y*c + e, x*b + y*d + f).
    """

    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Mat":
        return cls(1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @classmethod
    def scale(cls, sx: float, sy: float) -> "Mat":
        return cls(sx, 0.0, 0.0, sy, 0.0, 0.0)

    @classmethod
    def translate(cls, x: float, y: float) -> "Mat":
        return cls(1.0, 0.0, 0.0, 1.0, x, y)

    def invert(self) -> "Mat":
        """Return the inverse matrix; raises ValueError when singular."""
        det = self.a * self.d - self.c * self.b
        if det == 0:
            raise ValueError("matrix is not invertible")
        inv = 1.0 / det
        return Mat(
            self.d * inv,
            -self.b * inv,
            -self.c * inv,
            self.a * inv,
            (self.c * self.f - self.d * self.e) * inv,
            (self.b * self.e - self.a * self.f) * inv,
        )

    def multiply(self, other: "Mat") -> "Mat":
        """Compose: the result applies ``self`` first, then ``other``."""
        m, n = self, other
        return Mat(
            m[0] * n[0] + m[1] * n[2],
            m[0] * n[1] + m[1] * n[3],
            m[2] * n[0] + m[3] * n[2],
            m[2] * n[1] + m[3] * n[3],
            m[4] * n[0] + m[5] * n[2] + n[4],
            m[4] * n[1] + m[5] * n[3] + n[5],
        )

    def __matmul__(self, other: "Mat") -> "Mat":
        return self.multiply(other)


def is_same_point(a, b, max_dist: float) -> bool:
    """True if both coordinates differ by at most ``max_dist``."""
    return abs(b[0] - a[0]) <= max_dist and abs(b[1] - a[1]) <= max_dist


def line_intersection(a0: Vec, a1: Vec, b0: Vec, b1: Vec) -> Tuple[Vec, float, float]:
    """Intersect the lines a0-a1 and b0-b1.

    Returns the intersection point and its ratios along each line. For
    degenerate or parallel lines the ratios are infinite.
    """
    va = Vec(*a1) - a0
    vb = Vec(*b1) - b0

    if (
        (va.x == 0 and vb.x == 0)
        or (va.y == 0 and vb.y == 0)
        or (va.x == 0 and va.y == 0)
        or (vb.x == 0 and vb.y == 0)
    ):
        return Vec(), math.inf, math.inf
    d = va.y * vb.x - va.x * vb.y
    if d == 0:
        return Vec(), math.inf, math.inf
    p = (vb.y * (a0[0] - b0[0]) - a0[1] * vb.x + b0[1] * vb.x) / d
    if vb.x == 0:
        q = (a0[1] + p * va.y - b0[1]) / vb.y
    else:
        q = (a0[0] + p * va.x - b0[0]) / vb.x
    return Vec(*a0) + va * p, p, q


def line_point_dist_sqr(a: Vec, b: Vec, p: Vec) -> float:
    """Squared distance of ``p`` from the infinite line through a and b."""
    a = Vec(*a)
    v = Vec(*b) - a
    vn = v / v.length()
    d = (Vec(*p) - a).dot(vn)
    closest = a + vn * d
    return (Vec(*p) - closest).length_sqr()