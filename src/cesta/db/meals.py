"""Data access helpers for the weekly meal plan."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from cesta.models.planning import PlannedMeal

from .models import PlannedMealORM
from .repository import session_scope


def _to_model(row: PlannedMealORM) -> PlannedMeal:
    return PlannedMeal.model_validate(
        {
            "id": row.id,
            "user_id": row.user_id,
            "day_name": row.day_name,
            "meal_type": row.meal_type,
            "recipe_id": row.recipe_id,
        }
    )


def list_planned_meals(user_id: str, day_name: Optional[str] = None) -> List[PlannedMeal]:
    """Return a user's planned meals, optionally restricted to one weekday."""

    with session_scope() as session:
        stmt = select(PlannedMealORM).where(PlannedMealORM.user_id == user_id)
        if day_name:
            stmt = stmt.where(PlannedMealORM.day_name == day_name)
        rows = session.execute(stmt.order_by(PlannedMealORM.id.asc())).scalars().all()
        return [_to_model(row) for row in rows]


def add_planned_meal(
    user_id: str,
    *,
    day_name: str,
    recipe_id: str,
    meal_type: str = "Almoço",
) -> PlannedMeal:
    with session_scope() as session:
        row = PlannedMealORM(
            user_id=user_id,
            day_name=day_name.strip(),
            meal_type=meal_type.strip(),
            recipe_id=recipe_id,
        )
        session.add(row)
        session.flush()
        return _to_model(row)


def delete_planned_meal(user_id: str, meal_id: int) -> None:
    with session_scope() as session:
        row = session.get(PlannedMealORM, meal_id)
        if row is None or row.user_id != user_id:
            raise ValueError(f"Planned meal {meal_id} not found")
        session.delete(row)


__all__ = ["list_planned_meals", "add_planned_meal", "delete_planned_meal"]
