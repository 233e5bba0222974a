from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..categories import Category
from ..errors import NotFoundError, StoreError
from .models import Meal, Restaurant, User

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(db: Session) -> Iterator[None]:
    """Roll back and re-raise persistence failures as a generic StoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store operation failed", exc_info=True)
        raise StoreError() from exc


# ── Generic single-row operations ───────────────────────────────────────


def _create(db: Session, model: type, **fields: Any) -> Any:
    with _store_errors(db):
        row = model(**fields)
        db.add(row)
        db.commit()
        return row


def _update(db: Session, model: type, label: str, item_id: int, **fields: Any) -> Any:
    with _store_errors(db):
        row = db.get(model, item_id)
        if row is None:
            raise NotFoundError(f"{label} not found")
        for key, value in fields.items():
            setattr(row, key, value)
        db.commit()
        return row


def _delete(db: Session, model: type, label: str, item_id: int) -> None:
    with _store_errors(db):
        row = db.get(model, item_id)
        if row is None:
            raise NotFoundError(f"{label} not found")
        db.delete(row)
        db.commit()


def _count(db: Session, model: type) -> int:
    with _store_errors(db):
        return db.scalar(select(func.count()).select_from(model)) or 0


# ── Users ───────────────────────────────────────────────────────────────


def get_user_by_username(db: Session, username: str) -> User | None:
    with _store_errors(db):
        return db.scalar(select(User).where(User.username == username))


def create_user(db: Session, username: str, password_hash: str) -> User:
    return _create(db, User, username=username, password=password_hash)


def count_users(db: Session) -> int:
    return _count(db, User)


# ── Meals ───────────────────────────────────────────────────────────────


def list_meals(db: Session) -> list[Meal]:
    with _store_errors(db):
        return list(db.scalars(select(Meal).order_by(Meal.name, Meal.id)))


def create_meal(db: Session, name: str, ingredients: str) -> Meal:
    return _create(db, Meal, name=name, ingredients=ingredients)


def update_meal(db: Session, meal_id: int, name: str, ingredients: str) -> Meal:
    return _update(db, Meal, "Meal", meal_id, name=name, ingredients=ingredients)


def delete_meal(db: Session, meal_id: int) -> None:
    _delete(db, Meal, "Meal", meal_id)


def count_meals(db: Session) -> int:
    return _count(db, Meal)


# ── Restaurants ─────────────────────────────────────────────────────────


def list_restaurants(db: Session, category: Category | None = None) -> list[Restaurant]:
    """All restaurants ordered by name, optionally narrowed to one category."""
    query = select(Restaurant)
    if category is not None:
        query = query.where(Restaurant.category == category.value)
    with _store_errors(db):
        return list(db.scalars(query.order_by(Restaurant.name, Restaurant.id)))


def create_restaurant(db: Session, name: str, category: Category, details: str) -> Restaurant:
    return _create(db, Restaurant, name=name, category=category.value, details=details)


def update_restaurant(
    db: Session,
    restaurant_id: int,
    name: str,
    category: Category,
    details: str,
) -> Restaurant:
    return _update(
        db, Restaurant, "Restaurant", restaurant_id,
        name=name, category=category.value, details=details,
    )


def delete_restaurant(db: Session, restaurant_id: int) -> None:
    _delete(db, Restaurant, "Restaurant", restaurant_id)


def count_restaurants(db: Session) -> int:
    return _count(db, Restaurant)
