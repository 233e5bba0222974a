from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

MAX_SECTORS = 12
WHEEL_RADIUS = 120.0
LABEL_RADIUS_RATIO = 0.7
LABEL_MAX_CHARS = 12
LABEL_KEEP_CHARS = 10

SEGMENT_COLORS = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
    "#F8C471", "#82E0AA",
]


@dataclass(frozen=True)
class Sector:
    index: int
    item_id: Any
    label: str
    color: str
    start_angle: float
    end_angle: float
    label_x: float
    label_y: float
    path: str

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def center_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2


def sector_count(item_count: int) -> int:
    return max(0, min(item_count, MAX_SECTORS))


def sector_span(n: int) -> float:
    if n <= 0:
        raise ValueError("a wheel needs at least one sector")
    return 360 / n


def truncate_label(name: str) -> str:
    if len(name) > LABEL_MAX_CHARS:
        return name[:LABEL_KEEP_CHARS] + "..."
    return name


def _point(angle: float, radius: float) -> tuple[float, float]:
    # 0 degrees is 12 o'clock and angles grow clockwise (SVG y points down)
    rad = math.radians(angle - 90)
    return radius * math.cos(rad), radius * math.sin(rad)


def sector_path(start_angle: float, end_angle: float, radius: float = WHEEL_RADIUS) -> str:
    """SVG path for one pie slice centred on the origin."""
    if end_angle - start_angle >= 360:
        # a single item fills the whole wheel; one arc cannot start and end on the same point
        return (
            f"M 0 {-radius:.2f} "
            f"A {radius:.2f} {radius:.2f} 0 1 1 0 {radius:.2f} "
            f"A {radius:.2f} {radius:.2f} 0 1 1 0 {-radius:.2f} Z"
        )
    x1, y1 = _point(start_angle, radius)
    x2, y2 = _point(end_angle, radius)
    large_arc = 0 if end_angle - start_angle <= 180 else 1
    return (
        f"M 0 0 L {x1:.2f} {y1:.2f} "
        f"A {radius:.2f} {radius:.2f} 0 {large_arc} 1 {x2:.2f} {y2:.2f} Z"
    )


def _item_field(item: Any, name: str) -> Any:
    return item.get(name) if isinstance(item, dict) else getattr(item, name)


def build_sectors(items: Sequence[Any]) -> list[Sector]:
    """
    Lay out one sector per visible item.

    Only the first ``MAX_SECTORS`` items, in the order given, get a sector.
    Sector ``i`` spans ``[i * 360/n, (i + 1) * 360/n)`` measured clockwise
    from the top of the wheel.
    """
    n = sector_count(len(items))
    if n == 0:
        return []
    span = sector_span(n)
    sectors: list[Sector] = []
    for i in range(n):
        start = i * span
        end = (i + 1) * span
        label_x, label_y = _point((start + end) / 2, WHEEL_RADIUS * LABEL_RADIUS_RATIO)
        sectors.append(Sector(
            index=i,
            item_id=_item_field(items[i], "id"),
            label=truncate_label(str(_item_field(items[i], "name"))),
            color=SEGMENT_COLORS[i % len(SEGMENT_COLORS)],
            start_angle=start,
            end_angle=end,
            label_x=round(label_x, 2),
            label_y=round(label_y, 2),
            path=sector_path(start, end),
        ))
    return sectors
