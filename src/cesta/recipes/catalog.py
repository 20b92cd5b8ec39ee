"""Built-in recipe catalog available to every user."""

from __future__ import annotations

from typing import Iterable, Optional

from cesta.models.planning import Recipe, RecipeIngredient


def _recipe(recipe_id: str, name: str, *ingredients: tuple[str, float, str]) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=name,
        ingredients=[
            RecipeIngredient(name=ing_name, quantity=quantity, unit=unit)
            for ing_name, quantity, unit in ingredients
        ],
    )


DEFAULT_CATALOG: tuple[Recipe, ...] = (
    _recipe(
        "550e8400-e29b-41d4-a716-446655440000",
        "Torrada com Abacate e Ovo",
        ("Pão de Forma", 1, "un"),
        ("Abacate", 0.5, "un"),
        ("Ovo", 1, "un"),
    ),
    _recipe(
        "550e8400-e29b-41d4-a716-446655440001",
        "Salmão Grelhado com Aspargos",
        ("Filé de Salmão", 400, "g"),
        ("Aspargos", 1, "maço"),
        ("Limão Siciliano", 0.5, "un"),
    ),
    _recipe(
        "3",
        "Bowl de Salada Verde",
        ("Mix de Folhas", 100, "g"),
        ("Brócolis", 50, "g"),
    ),
)


class CatalogRecipeSource:
    """Static in-memory recipe catalog."""

    def __init__(self, recipes: Iterable[Recipe] = DEFAULT_CATALOG):
        self._recipes = {recipe.id: recipe for recipe in recipes}

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    def __iter__(self):
        return iter(self._recipes.values())

    def __len__(self) -> int:
        return len(self._recipes)


__all__ = ["DEFAULT_CATALOG", "CatalogRecipeSource"]
