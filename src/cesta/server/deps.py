"""Dependency definitions for the Cesta API server."""

from __future__ import annotations

from typing import Callable, List, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from cesta.config import Settings, get_settings
from cesta.db.meals import add_planned_meal, delete_planned_meal, list_planned_meals
from cesta.models.planning import PlannedMeal
from cesta.recipes import RecipeSource, default_recipe_source
from cesta.shopping.groups import ShoppingGroupManager
from cesta.shopping.period import PeriodSelector

PlannedMealsProvider = Callable[[Optional[str]], List[PlannedMeal]]
PlannedMealCreator = Callable[[dict], PlannedMeal]
PlannedMealDeleter = Callable[[int], None]


def get_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
    settings: Settings = Depends(get_settings),
) -> str:
    """Resolve the acting user from the ``X-User-ID`` header."""

    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return settings.default_user_id


def get_planned_meals_provider(user_id: str = Depends(get_user_id)) -> PlannedMealsProvider:
    return lambda day=None: list_planned_meals(user_id, day)


def get_planned_meal_creator(user_id: str = Depends(get_user_id)) -> PlannedMealCreator:
    return lambda payload: add_planned_meal(user_id, **payload)


def get_planned_meal_deleter(user_id: str = Depends(get_user_id)) -> PlannedMealDeleter:
    return lambda meal_id: delete_planned_meal(user_id, meal_id)


def get_recipe_source(user_id: str = Depends(get_user_id)) -> RecipeSource:
    return default_recipe_source(user_id)


def get_period_selector(recipes: RecipeSource = Depends(get_recipe_source)) -> PeriodSelector:
    return PeriodSelector(recipes)


def get_group_manager(user_id: str = Depends(get_user_id)) -> ShoppingGroupManager:
    return ShoppingGroupManager(user_id)


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
