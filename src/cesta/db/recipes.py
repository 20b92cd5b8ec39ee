"""Persistence for user-authored recipes."""

from __future__ import annotations

from typing import List, Optional, Sequence
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from cesta.models.planning import Recipe, RecipeIngredient

from .models import RecipeIngredientORM, RecipeORM
from .repository import session_scope


def _to_model(row: RecipeORM) -> Recipe:
    return Recipe.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "ingredients": [
                {"name": ing.name, "quantity": ing.quantity, "unit": ing.unit}
                for ing in row.ingredients
            ],
        }
    )


def create_recipe(
    user_id: str,
    *,
    name: str,
    ingredients: Sequence[RecipeIngredient],
    recipe_id: Optional[str] = None,
) -> Recipe:
    with session_scope() as session:
        row = RecipeORM(id=recipe_id or str(uuid4()), user_id=user_id, name=name.strip())
        row.ingredients = [
            RecipeIngredientORM(
                position=position,
                name=ingredient.name,
                quantity=ingredient.quantity,
                unit=ingredient.unit,
            )
            for position, ingredient in enumerate(ingredients)
        ]
        session.add(row)
        session.flush()
        return _to_model(row)


def get_recipe(user_id: str, recipe_id: str) -> Optional[Recipe]:
    with session_scope() as session:
        row = session.execute(
            select(RecipeORM)
            .options(selectinload(RecipeORM.ingredients))
            .where(RecipeORM.id == recipe_id, RecipeORM.user_id == user_id)
        ).scalar_one_or_none()
        if row is None:
            return None
        return _to_model(row)


def list_recipes(user_id: str) -> List[Recipe]:
    with session_scope() as session:
        rows = (
            session.execute(
                select(RecipeORM)
                .options(selectinload(RecipeORM.ingredients))
                .where(RecipeORM.user_id == user_id)
                .order_by(RecipeORM.name.asc())
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


__all__ = ["create_recipe", "get_recipe", "list_recipes"]
