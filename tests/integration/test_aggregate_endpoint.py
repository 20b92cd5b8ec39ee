"""Integration tests for planned meals and list aggregation."""

from __future__ import annotations

import pytest
from fastapi import status

from cesta.db.recipes import create_recipe
from cesta.models.planning import RecipeIngredient


def _plan(client, headers, day, recipe_id):
    response = client.post("/meals", json={"day_name": day, "recipe_id": recipe_id}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_meals_crud(client, auth_headers):
    meal = _plan(client, auth_headers, "Segunda", "3")
    assert meal["meal_type"] == "Almoço"

    assert [m["recipe_id"] for m in client.get("/meals").json()] == ["3"]
    assert client.get("/meals", params={"day": "Terça"}).json() == []

    response = client.delete(f"/meals/{meal['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    response = client.delete(f"/meals/{meal['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_weekly_and_monthly_aggregation(client, auth_headers):
    create_recipe(
        "local",
        name="Suco",
        ingredients=[RecipeIngredient(name="Água", quantity=500, unit="ml")],
        recipe_id="suco",
    )
    _plan(client, auth_headers, "Segunda", "suco")
    _plan(client, auth_headers, "Quarta", "suco")
    _plan(client, auth_headers, "Quarta", "3")

    response = client.post("/shopping/aggregate", json={"period": "weekly"})
    assert response.status_code == status.HTTP_200_OK
    items = {item["id"]: item for item in response.json()}
    assert items["água"]["quantity"] == pytest.approx(1.0)
    assert items["água"]["unit"] == "L"
    assert items["brócolis"]["quantity"] == 50
    assert all(item["checked"] for item in items.values())

    response = client.post("/shopping/aggregate", json={"period": "monthly"})
    items = {item["id"]: item for item in response.json()}
    assert items["água"]["quantity"] == pytest.approx(4.0)
    assert items["brócolis"]["quantity"] == 200


def test_daily_aggregation_uses_requested_day(client, auth_headers):
    _plan(client, auth_headers, "Segunda", "550e8400-e29b-41d4-a716-446655440000")
    _plan(client, auth_headers, "Terça", "3")

    response = client.post("/shopping/aggregate", json={"period": "daily", "day": "Segunda"})
    assert response.status_code == status.HTTP_200_OK
    assert [item["name"] for item in response.json()] == ["Abacate", "Ovo", "Pão de Forma"]


def test_nothing_to_aggregate(client, auth_headers):
    response = client.post("/shopping/aggregate", json={"period": "weekly"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["code"] == "NOTHING_TO_AGGREGATE"

    _plan(client, auth_headers, "Segunda", "3")
    response = client.post("/shopping/aggregate", json={"period": "daily", "day": "Domingo"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "Domingo" in response.json()["detail"]


def test_invalid_period_is_rejected(client):
    response = client.post("/shopping/aggregate", json={"period": "yearly"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
