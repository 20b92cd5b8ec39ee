"""Pydantic models defining shared data contracts."""

from cesta.models.ingredients import AggregatedIngredient, IngredientTriple
from cesta.models.planning import Period, PlannedMeal, Recipe, RecipeIngredient
from cesta.models.shopping import (
    GROUP_KEY_SEPARATOR,
    GroupKey,
    GroupState,
    ShoppingGroup,
    ShoppingItem,
)

__all__ = [
    "AggregatedIngredient",
    "IngredientTriple",
    "Period",
    "PlannedMeal",
    "Recipe",
    "RecipeIngredient",
    "GROUP_KEY_SEPARATOR",
    "GroupKey",
    "GroupState",
    "ShoppingGroup",
    "ShoppingItem",
]
