from __future__ import annotations

from enum import Enum

from .errors import ValidationError

ALL = "all"


class Category(str, Enum):
    formal = "formal"
    sit_down = "sit-down"
    quick_service = "quick-service"


DISPLAY_NAMES: dict[Category, str] = {
    Category.formal: "Formal Dining",
    Category.sit_down: "Sit Down",
    Category.quick_service: "Quick Service",
}


def parse_category_filter(value: str | None) -> Category | None:
    """
    Turn a ``?category=`` style filter into a Category.

    ``None``, an empty string and ``"all"`` mean no filter. Anything outside
    the closed set is rejected rather than treated as "all".
    """
    if value is None:
        return None
    raw = value.strip()
    if not raw or raw == ALL:
        return None
    try:
        return Category(raw)
    except ValueError:
        raise ValidationError("Invalid category", field="category") from None


def display_name(category: Category | str) -> str:
    try:
        return DISPLAY_NAMES[Category(category)]
    except ValueError:
        return str(category)
