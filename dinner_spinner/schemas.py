from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .categories import ALL, Category, parse_category_filter


def _required_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} is required")
    return value


class LoginRequest(BaseModel):
    username: str
    password: str


class AuthStatus(BaseModel):
    authenticated: bool
    username: str | None = None


class MealIn(BaseModel):
    name: str
    ingredients: str

    @field_validator("name", "ingredients")
    @classmethod
    def _not_blank(cls, value: str, info: ValidationInfo) -> str:
        return _required_text(value, info.field_name)


class MealOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    ingredients: str
    created_at: datetime | None = None


class RestaurantIn(BaseModel):
    name: str
    category: Category
    details: str

    @field_validator("name", "details")
    @classmethod
    def _not_blank(cls, value: str, info: ValidationInfo) -> str:
        return _required_text(value, info.field_name)


class RestaurantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: Category
    details: str
    created_at: datetime | None = None


class SpinRequest(BaseModel):
    count: int = Field(default=1, description="Meals wanted; clamped to [1, 5]")


class RestaurantSpinRequest(BaseModel):
    category: str | None = ALL

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str | None) -> str:
        parsed = parse_category_filter(value)
        return parsed.value if parsed else ALL


class SectorOut(BaseModel):
    index: int
    item_id: int
    label: str
    color: str
    start_angle: float
    end_angle: float
    center_angle: float
    label_x: float
    label_y: float
    path: str


class WheelLayout(BaseModel):
    kind: str
    sector_count: int
    angle_per_sector: float
    duration: float
    min_turns: int
    max_turns: int
    sectors: list[SectorOut]
