"""
Ordered table setup and first-boot seeding.

Each step is idempotent, so running the list against an existing database
only fills in what is missing. Sample meals are added only on the boot that
creates the admin user, never after the admin has emptied the list.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy import inspect
from sqlalchemy.orm import Session, sessionmaker

from ..auth.users import hash_password
from ..config import DEFAULT_APP_CONFIG, AppConfig
from . import repository
from .database import Base, create_session_factory
from .models import Meal, Restaurant, User

logger = logging.getLogger(__name__)

SAMPLE_MEALS: list[tuple[str, str]] = [
    ("Spaghetti Bolognese", "Ground beef, pasta, tomato sauce, onions, garlic, herbs"),
    ("Chicken Stir Fry", "Chicken breast, mixed vegetables, soy sauce, ginger, garlic"),
    ("Grilled Salmon", "Salmon fillets, lemon, herbs, olive oil, vegetables"),
    ("Taco Tuesday", "Ground turkey, taco shells, lettuce, tomatoes, cheese, salsa"),
    ("Vegetable Curry", "Mixed vegetables, coconut milk, curry spices, rice"),
]


@dataclass
class MigrationContext:
    db: Session
    config: AppConfig
    first_boot: bool = False
    applied: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Migration:
    name: str
    apply: Callable[[MigrationContext], bool]


def _create_table(model: type) -> Callable[[MigrationContext], bool]:
    def apply(ctx: MigrationContext) -> bool:
        bind = ctx.db.get_bind()
        if inspect(bind).has_table(model.__tablename__):
            return False
        Base.metadata.create_all(bind, tables=[model.__table__])
        return True

    return apply


def _seed_admin(ctx: MigrationContext) -> bool:
    if repository.get_user_by_username(ctx.db, ctx.config.admin_username) is not None:
        return False
    repository.create_user(
        ctx.db,
        ctx.config.admin_username,
        hash_password(ctx.config.admin_password),
    )
    ctx.first_boot = True
    return True


def _seed_sample_meals(ctx: MigrationContext) -> bool:
    if not ctx.first_boot or repository.count_meals(ctx.db) > 0:
        return False
    for name, ingredients in SAMPLE_MEALS:
        repository.create_meal(ctx.db, name, ingredients)
    return True


MIGRATIONS: list[Migration] = [
    Migration("create_users_table", _create_table(User)),
    Migration("create_meals_table", _create_table(Meal)),
    Migration("create_restaurants_table", _create_table(Restaurant)),
    Migration("seed_admin_user", _seed_admin),
    Migration("seed_sample_meals", _seed_sample_meals),
]


def run_migrations(
    session_factory: sessionmaker,
    config: AppConfig = DEFAULT_APP_CONFIG,
    migrations: list[Migration] | None = None,
) -> list[str]:
    """Apply every step in order. Returns the names of steps that changed something."""
    with session_factory() as db:
        ctx = MigrationContext(db=db, config=config)
        for migration in migrations or MIGRATIONS:
            if migration.apply(ctx):
                ctx.applied.append(migration.name)
                logger.info("Applied %s", migration.name)
    return ctx.applied


def main() -> None:
    """Create/verify the database and report row counts."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = DEFAULT_APP_CONFIG
    session_factory = create_session_factory(config.database_url)

    logger.info("Checking database setup at %s", config.database_url)
    run_migrations(session_factory, config)

    with session_factory() as db:
        logger.info("Users table has %d user(s)", repository.count_users(db))
        logger.info("Meals table has %d meal(s)", repository.count_meals(db))
        logger.info("Restaurants table has %d restaurant(s)", repository.count_restaurants(db))
    logger.info("Database setup complete")


if __name__ == "__main__":
    main()
