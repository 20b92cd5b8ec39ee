"""Recipe providers consumed by the period selector."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from cesta.db import recipes as recipe_store
from cesta.models.planning import Recipe

logger = logging.getLogger(__name__)


class RecipeSource(Protocol):
    """Read-only lookup of a recipe and its ingredients by id."""

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        ...


class DatabaseRecipeSource:
    """Recipes the user authored, read from the local store."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return recipe_store.get_recipe(self.user_id, recipe_id)


class ChainedRecipeSource:
    """Ask each source in turn and return the first hit."""

    def __init__(self, *sources: RecipeSource):
        self._sources = sources

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        for source in self._sources:
            recipe = source.get_recipe(recipe_id)
            if recipe is not None:
                return recipe
        logger.debug("Recipe %s not found in %s source(s)", recipe_id, len(self._sources))
        return None


__all__ = ["RecipeSource", "DatabaseRecipeSource", "ChainedRecipeSource"]
