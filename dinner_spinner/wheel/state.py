"""
View-model for a spinning wheel.

Rendering code dispatches actions and draws whatever ``WheelState`` says;
all server interaction happens outside ``reduce``, which is pure. Randomness
enters only through the ``turns`` carried on ``SpinResolved``, so replaying
the same actions always yields the same state.
"""
from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Union

from ..categories import ALL, parse_category_filter
from ..errors import ValidationError
from ..selection import filter_by_category
from .layout import Sector, build_sectors
from .spin import RESTAURANT_WHEEL, WheelKind, draw_turns, locate_sector, target_rotation

TRY_AGAIN_MESSAGE = "Error during spin. Please try again."
EMPTY_WHEEL_MESSAGE = "Nothing to spin yet! Add some in the admin panel."


class Phase(str, Enum):
    idle = "idle"
    spinning = "spinning"
    revealed = "revealed"


@dataclass(frozen=True)
class WheelState:
    kind: WheelKind = RESTAURANT_WHEEL
    items: tuple = ()
    category: str = ALL
    visible_items: tuple = ()
    sectors: tuple[Sector, ...] = ()
    phase: Phase = Phase.idle
    rotation: float = 0.0
    target_sector: int | None = None
    pending: tuple = ()
    result: tuple = ()
    error: str | None = None
    # a reload that arrived mid-spin, applied once the wheel stops
    queued_items: tuple | None = None

    @property
    def visible_result(self) -> tuple | None:
        """The winners, once the wheel has stopped; ``None`` before that."""
        return self.result if self.phase is Phase.revealed else None

    @property
    def can_spin(self) -> bool:
        return self.phase is not Phase.spinning and bool(self.sectors)


@dataclass(frozen=True)
class ItemsLoaded:
    items: tuple


@dataclass(frozen=True)
class CategoryChanged:
    category: str


@dataclass(frozen=True)
class SpinStarted:
    pass


@dataclass(frozen=True)
class SpinResolved:
    winners: tuple
    turns: int


@dataclass(frozen=True)
class AnimationFinished:
    pass


@dataclass(frozen=True)
class SpinFailed:
    message: str = TRY_AGAIN_MESSAGE


Action = Union[ItemsLoaded, CategoryChanged, SpinStarted, SpinResolved, AnimationFinished, SpinFailed]


def _with_items(state: WheelState, items: tuple, category: str) -> WheelState:
    visible = tuple(filter_by_category(items, category))
    return replace(
        state,
        items=items,
        category=category,
        visible_items=visible,
        sectors=tuple(build_sectors(visible)),
        queued_items=None,
    )


def _settled(state: WheelState) -> WheelState:
    """Apply a reload held back while the wheel was spinning."""
    if state.queued_items is None:
        return state
    return _with_items(state, state.queued_items, state.category)


def _winner_id(winner: Any) -> Any:
    return winner.get("id") if isinstance(winner, dict) else getattr(winner, "id")


def reduce(state: WheelState, action: Action) -> WheelState:
    if isinstance(action, ItemsLoaded):
        if state.phase is Phase.spinning:
            # the rotation targets the current sectors until the wheel stops
            return replace(state, queued_items=tuple(action.items))
        return _with_items(state, tuple(action.items), state.category)

    if isinstance(action, CategoryChanged):
        if state.phase is Phase.spinning:
            return state
        try:
            parsed = parse_category_filter(action.category)
        except ValidationError as exc:
            return replace(state, error=exc.message)
        return replace(
            _with_items(state, state.items, parsed.value if parsed else ALL),
            phase=Phase.idle,
            result=(),
            error=None,
        )

    if isinstance(action, SpinStarted):
        if state.phase is Phase.spinning:
            return state
        if not state.sectors:
            return replace(state, error=EMPTY_WHEEL_MESSAGE)
        return replace(
            state,
            phase=Phase.spinning,
            target_sector=None,
            pending=(),
            result=(),
            error=None,
        )

    if isinstance(action, SpinResolved):
        if state.phase is not Phase.spinning:
            return state
        if not action.winners:
            return _settled(replace(state, phase=Phase.idle, error=EMPTY_WHEEL_MESSAGE))
        index = locate_sector(state.sectors, _winner_id(action.winners[0]))
        return replace(
            state,
            target_sector=index,
            rotation=target_rotation(index, len(state.sectors), action.turns),
            pending=tuple(action.winners),
        )

    if isinstance(action, AnimationFinished):
        if state.phase is not Phase.spinning or not state.pending:
            return state
        return _settled(replace(state, phase=Phase.revealed, result=state.pending, pending=()))

    if isinstance(action, SpinFailed):
        return _settled(
            replace(state, phase=Phase.idle, pending=(), target_sector=None, error=action.message)
        )

    raise TypeError(f"unknown wheel action: {action!r}")


def resolve(state: WheelState, winners: Sequence[Any], rng: random.Random | None = None) -> SpinResolved:
    """Build the ``SpinResolved`` action for winners returned by the server."""
    return SpinResolved(winners=tuple(winners), turns=draw_turns(state.kind, rng))
