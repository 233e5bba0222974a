from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any, TypeVar

from ..categories import Category

T = TypeVar("T")

MAX_MEAL_PICKS = 5

_system_random = random.SystemRandom()


def clamp_meal_count(count: int, available: int) -> int:
    """Clamp a requested meal count to ``[1, min(5, available)]``; 0 if nothing is stored."""
    if available <= 0:
        return 0
    return max(1, min(count, MAX_MEAL_PICKS, available))


def filter_by_category(items: Sequence[Any], category: Category | str | None) -> list[Any]:
    """Keep items whose ``category`` equals the filter. ``None`` or ``"all"`` keeps everything."""
    if category is None or category == "all":
        return list(items)
    wanted = Category(category).value
    return [item for item in items if _category_of(item) == wanted]


def _category_of(item: Any) -> str | None:
    value = item.get("category") if isinstance(item, dict) else getattr(item, "category", None)
    return value.value if isinstance(value, Category) else value


def pick_random(
    items: Sequence[T],
    count: int = 1,
    rng: random.Random | None = None,
) -> list[T]:
    """
    Draw ``count`` distinct items uniformly at random.

    Every ordered selection of ``count`` items is equally likely, so the
    first element is as fair as the rest. ``count`` is clamped to
    ``[1, len(items)]``; an empty snapshot yields an empty list. The items
    are returned as given, never copied or re-shaped.
    """
    if not items:
        return []
    k = max(1, min(count, len(items)))
    return (rng or _system_random).sample(list(items), k)
