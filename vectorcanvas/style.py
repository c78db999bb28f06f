"""Gradient colour stops and drop shadow helpers."""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .geometry import Vec

RGBA = Tuple[int, int, int, int]


def _rgba(color: Sequence[int]) -> RGBA:
    values = tuple(color)
    if len(values) == 3:
        values += (255,)
    if len(values) != 4 or not all(
        isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 255 for v in values
    ):
        raise ValueError(f"invalid color: {color!r}")
    return values  # type: ignore[return-value]


@dataclass(frozen=True)
class GradientStop:
    """A colour at a position along a gradient."""

    pos: float
    color: RGBA


def add_color_stop(stops: List[GradientStop], pos: float, color: Sequence[int]) -> GradientStop:
    """Insert a stop after any stops at the same or lower position."""
    stop = GradientStop(pos, _rgba(color))
    bisect.insort_right(stops, stop, key=lambda s: s.pos)
    return stop


@dataclass
class LinearGradient:
    """Gradient whose colour is constant along lines across start-end."""

    start: Vec
    end: Vec
    stops: List[GradientStop] = field(default_factory=list)
    opaque: bool = True

    def __post_init__(self) -> None:
        self.start = Vec(*self.start)
        self.end = Vec(*self.end)

    def add_color_stop(self, pos: float, color: Sequence[int]) -> GradientStop:
        stop = add_color_stop(self.stops, pos, color)
        if stop.color[3] < 255:
            self.opaque = False
        return stop


@dataclass
class RadialGradient:
    """Gradient between two circles."""

    start: Vec
    radius_start: float
    end: Vec
    radius_end: float
    stops: List[GradientStop] = field(default_factory=list)
    opaque: bool = True

    def __post_init__(self) -> None:
        self.start = Vec(*self.start)
        self.end = Vec(*self.end)

    def add_color_stop(self, pos: float, color: Sequence[int]) -> GradientStop:
        stop = add_color_stop(self.stops, pos, color)
        if stop.color[3] < 255:
            self.opaque = False
        return stop


def shadow_points(points: Iterable[Sequence[float]], offset_x: float, offset_y: float) -> List[Vec]:
    """Points shifted by the shadow offset."""
    return [Vec(p[0] + offset_x, p[1] + offset_y) for p in points]


def shadow_alpha(alpha: int, global_alpha: float) -> int:
    """Shadow colour alpha scaled by the global alpha, rounded half up."""
    value = math.floor((alpha / 255.0) * global_alpha * 255.0 + 0.5)
    return max(0, min(255, value))