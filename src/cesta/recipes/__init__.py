"""Recipe sources: the built-in catalog and per-user custom recipes."""

from cesta.recipes.catalog import DEFAULT_CATALOG, CatalogRecipeSource
from cesta.recipes.sources import ChainedRecipeSource, DatabaseRecipeSource, RecipeSource


def default_recipe_source(user_id: str) -> ChainedRecipeSource:
    """User recipes first, then the built-in catalog."""

    return ChainedRecipeSource(DatabaseRecipeSource(user_id), CatalogRecipeSource())


__all__ = [
    "DEFAULT_CATALOG",
    "CatalogRecipeSource",
    "ChainedRecipeSource",
    "DatabaseRecipeSource",
    "RecipeSource",
    "default_recipe_source",
]
