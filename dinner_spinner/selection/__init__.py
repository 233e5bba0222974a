"""
Selection engine.

Responsibilities:
- Narrow a candidate snapshot to one restaurant category (or keep all).
- Clamp the requested meal count to what can be offered.
- Draw winners uniformly at random without replacement.
"""
from .engine import (
    MAX_MEAL_PICKS,
    clamp_meal_count,
    filter_by_category,
    pick_random,
)

__all__ = ["MAX_MEAL_PICKS", "clamp_meal_count", "filter_by_category", "pick_random"]
