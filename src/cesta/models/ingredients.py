"""Ingredient data contracts shared by the aggregation pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IngredientTriple(BaseModel):
    """One ingredient line read from a recipe, before aggregation."""

    name: str = Field(min_length=1, max_length=255)
    quantity: float = Field(gt=0, allow_inf_nan=False)
    unit: str = Field(default="", max_length=64)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class AggregatedIngredient(BaseModel):
    """Display-ready checklist line produced by merging same-identity triples."""

    id: str
    name: str
    quantity: float
    unit: str
    checked: bool = Field(default=True)

    model_config = ConfigDict(frozen=True)


__all__ = ["IngredientTriple", "AggregatedIngredient"]
