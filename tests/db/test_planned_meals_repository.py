from __future__ import annotations

import pytest

from cesta.db.meals import add_planned_meal, delete_planned_meal, list_planned_meals


def test_add_and_list_planned_meals():
    add_planned_meal("u1", day_name="Segunda", recipe_id="3")
    add_planned_meal("u1", day_name=" Terça ", recipe_id="abc", meal_type="Jantar")
    add_planned_meal("u2", day_name="Segunda", recipe_id="3")

    meals = list_planned_meals("u1")

    assert [(m.day_name, m.recipe_id, m.meal_type) for m in meals] == [
        ("Segunda", "3", "Almoço"),
        ("Terça", "abc", "Jantar"),
    ]
    assert [m.recipe_id for m in list_planned_meals("u1", "Terça")] == ["abc"]


def test_delete_planned_meal_is_scoped_to_user():
    meal = add_planned_meal("u1", day_name="Segunda", recipe_id="3")

    with pytest.raises(ValueError):
        delete_planned_meal("u2", meal.id)

    delete_planned_meal("u1", meal.id)
    assert list_planned_meals("u1") == []

    with pytest.raises(ValueError):
        delete_planned_meal("u1", meal.id)
