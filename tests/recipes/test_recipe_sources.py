from __future__ import annotations

from cesta.db.recipes import create_recipe
from cesta.models.planning import RecipeIngredient
from cesta.recipes import DEFAULT_CATALOG, CatalogRecipeSource, default_recipe_source


def test_catalog_contains_builtin_recipes():
    catalog = CatalogRecipeSource()

    assert len(catalog) == len(DEFAULT_CATALOG) == 3
    salad = catalog.get_recipe("3")
    assert salad is not None
    assert [(i.name, i.quantity, i.unit) for i in salad.ingredients] == [
        ("Mix de Folhas", 100, "g"),
        ("Brócolis", 50, "g"),
    ]
    assert catalog.get_recipe("missing") is None


def test_user_recipes_take_precedence_over_catalog():
    create_recipe(
        "u1",
        name="Minha salada",
        ingredients=[RecipeIngredient(name="Alface", quantity=1, unit="un")],
        recipe_id="3",
    )

    mine = default_recipe_source("u1").get_recipe("3")
    theirs = default_recipe_source("u2").get_recipe("3")

    assert mine.name == "Minha salada"
    assert theirs.name == "Bowl de Salada Verde"
    assert default_recipe_source("u1").get_recipe("nope") is None
