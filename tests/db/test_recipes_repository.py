from __future__ import annotations

from cesta.db.recipes import create_recipe, get_recipe, list_recipes
from cesta.models.planning import RecipeIngredient


def test_create_and_fetch_recipe_keeps_ingredient_order():
    created = create_recipe(
        "u1",
        name=" Omelete ",
        ingredients=[
            RecipeIngredient(name="Ovo", quantity=3, unit="un"),
            RecipeIngredient(name="Queijo", quantity=50, unit="g"),
        ],
    )

    fetched = get_recipe("u1", created.id)

    assert fetched == created
    assert fetched.name == "Omelete"
    assert [ing.name for ing in fetched.ingredients] == ["Ovo", "Queijo"]


def test_recipes_are_private_to_their_user():
    create_recipe("u1", name="Bolo", ingredients=[], recipe_id="bolo")

    assert get_recipe("u2", "bolo") is None
    assert [recipe.id for recipe in list_recipes("u1")] == ["bolo"]
    assert list_recipes("u2") == []
