"""
Life balance "hexagon": a radar polygon over the areas, in a 200x200 SVG viewBox.

Area i sits on the axis at angle 2*pi*i/n - pi/2 (first axis points up); its
distance from the center is value/10 of the 90 unit radius.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from app.models import LifeBalanceArea

CENTER = 100.0
RADIUS = 90.0
MAX_VALUE = 10
LABEL_VALUE = 11


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class AxisLabel:
    text: str
    at: Point
    anchor: str  # start | middle | end
    dy: str


@dataclass(frozen=True)
class HexagonLayout:
    polygon: Tuple[Point, ...]
    axes: Tuple[Point, ...]  # axis end points, the center is the start
    labels: Tuple[AxisLabel, ...]

    def svg_points(self) -> str:
        return polygon_points(self.polygon)


def vertex(index: int, value: float, total: int) -> Point:
    angle = (math.pi * 2 * index) / total - math.pi / 2
    radius = (value / MAX_VALUE) * RADIUS
    return Point(CENTER + math.cos(angle) * radius, CENTER + math.sin(angle) * radius)


def polygon_points(points: Sequence[Point]) -> str:
    return " ".join(f"{p.x:g},{p.y:g}" for p in points)


def _label(area: LifeBalanceArea, at: Point) -> AxisLabel:
    # rounding keeps the vertical axis "centered" despite float noise
    x, y = round(at.x, 6), round(at.y, 6)
    anchor = "start" if x > CENTER else "end" if x < CENTER else "middle"
    dy = "0.5em" if y > CENTER else "-0.5em" if y < CENTER else "0"
    return AxisLabel(text=area.name, at=at, anchor=anchor, dy=dy)


def layout(areas: Sequence[LifeBalanceArea]) -> HexagonLayout:
    n = len(areas)
    if n == 0:
        return HexagonLayout(polygon=(), axes=(), labels=())
    polygon: List[Point] = [vertex(i, a.value, n) for i, a in enumerate(areas)]
    axes = [vertex(i, MAX_VALUE, n) for i in range(n)]
    labels = [_label(a, vertex(i, LABEL_VALUE, n)) for i, a in enumerate(areas)]
    return HexagonLayout(polygon=tuple(polygon), axes=tuple(axes), labels=tuple(labels))


def balance_score(areas: Sequence[LifeBalanceArea]) -> float:
    """Average value, 0 for no areas."""
    if not areas:
        return 0.0
    return sum(a.value for a in areas) / len(areas)
