from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .layout import Sector, sector_span


@dataclass(frozen=True)
class WheelKind:
    name: str
    min_turns: int
    max_turns: int  # exclusive
    duration: float  # seconds


MEAL_WHEEL = WheelKind("meal", min_turns=3, max_turns=6, duration=2.0)
RESTAURANT_WHEEL = WheelKind("restaurant", min_turns=4, max_turns=7, duration=3.0)


@dataclass(frozen=True)
class SpinPlan:
    winner_id: Any
    sector_index: int
    turns: int
    rotation: float
    duration: float


def locate_sector(sectors: Sequence[Sector], winner_id: Any) -> int:
    """
    Index of the sector backed by ``winner_id``.

    A winner outside the visible sectors (more items than sectors) falls
    back to sector 0.
    """
    for sector in sectors:
        if sector.item_id == winner_id:
            return sector.index
    return 0


def target_rotation(sector_index: int, n: int, turns: int) -> float:
    """Clockwise rotation in degrees that parks the sector centre under the top pointer."""
    span = sector_span(n)
    return turns * 360 + (360 - (sector_index * span + span / 2))


def sector_at_pointer(rotation: float, n: int) -> int:
    """Which sector sits under the top pointer once the wheel has turned ``rotation`` degrees."""
    span = sector_span(n)
    angle = (-rotation) % 360
    return int(angle // span) % n


def draw_turns(kind: WheelKind, rng: random.Random | None = None) -> int:
    """
    Whole extra turns for one spin.

    Whole turns keep the landing exact; a fractional turn would rotate the
    winner away from the pointer.
    """
    return (rng or random).randrange(kind.min_turns, kind.max_turns)


def plan_spin(
    kind: WheelKind,
    sectors: Sequence[Sector],
    winner_id: Any,
    rng: random.Random | None = None,
) -> SpinPlan:
    if not sectors:
        raise ValueError("cannot spin an empty wheel")
    index = locate_sector(sectors, winner_id)
    turns = draw_turns(kind, rng)
    return SpinPlan(
        winner_id=winner_id,
        sector_index=index,
        turns=turns,
        rotation=target_rotation(index, len(sectors), turns),
        duration=kind.duration,
    )


def describe_wheel(kind: WheelKind, sectors: Sequence[Sector]) -> dict[str, Any]:
    """JSON-ready layout handed to clients so they draw what the server computed."""
    n = len(sectors)
    return {
        "kind": kind.name,
        "sector_count": n,
        "angle_per_sector": sector_span(n) if n else 0.0,
        "duration": kind.duration,
        "min_turns": kind.min_turns,
        "max_turns": kind.max_turns,
        "sectors": [
            {
                "index": s.index,
                "item_id": s.item_id,
                "label": s.label,
                "color": s.color,
                "start_angle": s.start_angle,
                "end_angle": s.end_angle,
                "center_angle": s.center_angle,
                "label_x": s.label_x,
                "label_y": s.label_y,
                "path": s.path,
            }
            for s in sectors
        ],
    }
