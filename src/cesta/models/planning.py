"""Meal-plan and recipe data models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Period(str, Enum):
    """Span of the meal plan that feeds a shopping list."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RecipeIngredient(BaseModel):
    """Ingredient as listed on a recipe."""

    name: str = Field(min_length=1, max_length=255)
    quantity: float = Field(gt=0)
    unit: str = Field(default="un", max_length=64)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class Recipe(BaseModel):
    """Recipe as seen by the shopping pipeline: an id and its ingredients."""

    id: str
    name: str
    ingredients: list[RecipeIngredient] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class PlannedMeal(BaseModel):
    """A recipe scheduled on a weekday of the user's plan."""

    id: Optional[int] = Field(default=None)
    user_id: str
    day_name: str = Field(min_length=1, max_length=32)
    meal_type: str = Field(default="Almoço", max_length=64)
    recipe_id: str = Field(min_length=1, max_length=64)

    model_config = ConfigDict(frozen=True)


__all__ = ["Period", "RecipeIngredient", "Recipe", "PlannedMeal"]
