from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from sqlalchemy.orm import Session
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import end_session, get_current_user, require_admin, start_session
from .auth.users import authenticate
from .categories import ALL, Category, display_name, parse_category_filter
from .config import DEFAULT_APP_CONFIG, AppConfig
from .errors import AuthError, NotFoundError, register_error_handlers
from .schemas import (
    AuthStatus,
    LoginRequest,
    MealIn,
    MealOut,
    RestaurantIn,
    RestaurantOut,
    RestaurantSpinRequest,
    SpinRequest,
    WheelLayout,
)
from .selection import clamp_meal_count, pick_random
from .store import repository
from .store.cache import ItemListCache
from .store.database import create_session_factory, get_db
from .store.migrations import run_migrations
from .wheel.layout import build_sectors
from .wheel.spin import MEAL_WHEEL, RESTAURANT_WHEEL, describe_wheel

logger = logging.getLogger(__name__)

MEALS = "meals"
RESTAURANTS = "restaurants"

router = APIRouter()


def get_list_cache(request: Request) -> ItemListCache:
    return request.app.state.list_cache


def _cached_list(
    request: Request,
    response: Response,
    cache: ItemListCache,
    kind: str,
    key: str,
    load: Callable[[], list[dict[str, Any]]],
) -> Any:
    """Serve a list with a revision ETag; a mutation of ``kind`` changes the tag."""
    # read before loading so a mutation landing mid-load leaves this tag stale
    revision = cache.revision(kind)
    etag = cache.etag(kind, revision)
    if request.headers.get("if-none-match") == etag:
        return Response(status_code=304, headers={"ETag": etag, "Cache-Control": "no-cache"})

    items = cache.get(kind, key)
    if items is None:
        items = load()
        cache.set(kind, key, items, revision)

    response.headers["ETag"] = etag
    response.headers["Cache-Control"] = "no-cache"
    return items


# ── Public endpoints ─────────────────────────────────────────────────────


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@router.post("/api/login")
def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)) -> dict:
    user = authenticate(db, body.username, body.password)
    if not user:
        raise AuthError("Invalid credentials")
    start_session(request, user)
    logger.info("Admin session started for %s", user["username"])
    return {"success": True, "message": "Login successful"}


@router.post("/api/logout")
def logout(request: Request) -> dict:
    end_session(request)
    return {"success": True}


@router.get("/api/auth/status", response_model=AuthStatus)
def auth_status(request: Request) -> AuthStatus:
    user = get_current_user(request)
    return AuthStatus(
        authenticated=user is not None,
        username=user["username"] if user else None,
    )


# ── Meals ────────────────────────────────────────────────────────────────


def _load_meals(db: Session) -> list[dict[str, Any]]:
    return [MealOut.model_validate(m).model_dump(mode="json") for m in repository.list_meals(db)]


@router.get("/api/meals", response_model=list[MealOut])
def list_meals(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    cache: ItemListCache = Depends(get_list_cache),
) -> Any:
    return _cached_list(request, response, cache, MEALS, ALL, lambda: _load_meals(db))


@router.get("/api/meals/wheel", response_model=WheelLayout)
def meal_wheel(db: Session = Depends(get_db)) -> dict:
    return describe_wheel(MEAL_WHEEL, build_sectors(repository.list_meals(db)))


@router.post("/api/meals")
def create_meal(
    body: MealIn,
    db: Session = Depends(get_db),
    cache: ItemListCache = Depends(get_list_cache),
    user: dict = Depends(require_admin),
) -> dict:
    meal = repository.create_meal(db, body.name, body.ingredients)
    cache.invalidate(MEALS)
    logger.info("%s added meal %d", user["username"], meal.id)
    return {"success": True, "id": meal.id, "message": "Meal added successfully"}


@router.put("/api/meals/{meal_id}")
def update_meal(
    meal_id: int,
    body: MealIn,
    db: Session = Depends(get_db),
    cache: ItemListCache = Depends(get_list_cache),
    user: dict = Depends(require_admin),
) -> dict:
    repository.update_meal(db, meal_id, body.name, body.ingredients)
    cache.invalidate(MEALS)
    logger.info("%s updated meal %d", user["username"], meal_id)
    return {"success": True, "message": "Meal updated successfully"}


@router.delete("/api/meals/{meal_id}")
def delete_meal(
    meal_id: int,
    db: Session = Depends(get_db),
    cache: ItemListCache = Depends(get_list_cache),
    user: dict = Depends(require_admin),
) -> dict:
    repository.delete_meal(db, meal_id)
    cache.invalidate(MEALS)
    logger.info("%s deleted meal %d", user["username"], meal_id)
    return {"success": True, "message": "Meal deleted successfully"}


@router.post("/api/spin", response_model=list[MealOut])
def spin_meals(body: SpinRequest | None = None, db: Session = Depends(get_db)) -> list:
    requested = body.count if body else 1
    meals = repository.list_meals(db)
    return pick_random(meals, clamp_meal_count(requested, len(meals))) if meals else []


# ── Restaurants ──────────────────────────────────────────────────────────


@router.get("/api/categories")
def categories() -> list[dict[str, str]]:
    options = [{"value": ALL, "label": "All"}]
    options.extend({"value": c.value, "label": display_name(c)} for c in Category)
    return options


def _load_restaurants(db: Session, category: str | None) -> list[dict[str, Any]]:
    rows = repository.list_restaurants(db, parse_category_filter(category))
    return [RestaurantOut.model_validate(r).model_dump(mode="json") for r in rows]


@router.get("/api/restaurants", response_model=list[RestaurantOut])
def list_restaurants(
    request: Request,
    response: Response,
    category: str | None = None,
    db: Session = Depends(get_db),
    cache: ItemListCache = Depends(get_list_cache),
) -> Any:
    parsed = parse_category_filter(category)
    key = parsed.value if parsed else ALL
    return _cached_list(
        request, response, cache, RESTAURANTS, key,
        lambda: _load_restaurants(db, category),
    )


@router.get("/api/restaurants/wheel", response_model=WheelLayout)
def restaurant_wheel(category: str | None = None, db: Session = Depends(get_db)) -> dict:
    rows = repository.list_restaurants(db, parse_category_filter(category))
    return describe_wheel(RESTAURANT_WHEEL, build_sectors(rows))


@router.post("/api/restaurants")
def create_restaurant(
    body: RestaurantIn,
    db: Session = Depends(get_db),
    cache: ItemListCache = Depends(get_list_cache),
    user: dict = Depends(require_admin),
) -> dict:
    restaurant = repository.create_restaurant(db, body.name, body.category, body.details)
    cache.invalidate(RESTAURANTS)
    logger.info("%s added restaurant %d", user["username"], restaurant.id)
    return {"success": True, "id": restaurant.id, "message": "Restaurant added successfully"}


@router.put("/api/restaurants/{restaurant_id}")
def update_restaurant(
    restaurant_id: int,
    body: RestaurantIn,
    db: Session = Depends(get_db),
    cache: ItemListCache = Depends(get_list_cache),
    user: dict = Depends(require_admin),
) -> dict:
    repository.update_restaurant(db, restaurant_id, body.name, body.category, body.details)
    cache.invalidate(RESTAURANTS)
    logger.info("%s updated restaurant %d", user["username"], restaurant_id)
    return {"success": True, "message": "Restaurant updated successfully"}


@router.delete("/api/restaurants/{restaurant_id}")
def delete_restaurant(
    restaurant_id: int,
    db: Session = Depends(get_db),
    cache: ItemListCache = Depends(get_list_cache),
    user: dict = Depends(require_admin),
) -> dict:
    repository.delete_restaurant(db, restaurant_id)
    cache.invalidate(RESTAURANTS)
    logger.info("%s deleted restaurant %d", user["username"], restaurant_id)
    return {"success": True, "message": "Restaurant deleted successfully"}


@router.post("/api/restaurants/spin", response_model=RestaurantOut)
def spin_restaurant(
    body: RestaurantSpinRequest | None = None,
    db: Session = Depends(get_db),
) -> Any:
    category = parse_category_filter(body.category if body else None)
    winners = pick_random(repository.list_restaurants(db, category), 1)
    if not winners:
        raise NotFoundError("No restaurants found for the selected category")
    return winners[0]


# ── Admin endpoints ──────────────────────────────────────────────────────


@router.get("/api/cache/stats")
def cache_stats(
    cache: ItemListCache = Depends(get_list_cache),
    user: dict = Depends(require_admin),
) -> dict:
    return cache.stats()


def create_app(config: AppConfig = DEFAULT_APP_CONFIG) -> FastAPI:
    """Build an app bound to its own store and list cache."""
    app = FastAPI(title="Family Decision Spinner API", version="1.0.0")
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret,
        max_age=config.session_max_age,
        same_site="lax",
    )
    register_error_handlers(app)

    app.state.config = config
    app.state.session_factory = create_session_factory(config.database_url)
    app.state.list_cache = ItemListCache()
    run_migrations(app.state.session_factory, config)

    app.include_router(router)
    return app
