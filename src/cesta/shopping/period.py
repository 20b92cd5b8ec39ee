"""Select which planned meals feed the aggregator and scale their quantities."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence

from cesta.models.ingredients import IngredientTriple
from cesta.models.planning import Period, PlannedMeal
from cesta.recipes.sources import RecipeSource
from cesta.shopping.errors import NothingToAggregateError

logger = logging.getLogger(__name__)

# Weeks per month used for monthly lists. A fixed product approximation that
# user-visible totals depend on; not derived from the calendar.
MONTHLY_MULTIPLIER = 4

PERIOD_MULTIPLIERS: dict[Period, int] = {
    Period.DAILY: 1,
    Period.WEEKLY: 1,
    Period.MONTHLY: MONTHLY_MULTIPLIER,
}

# Indexed by date.isoweekday() % 7, so Sunday is 0.
WEEKDAY_NAMES = ("Domingo", "Segunda", "Terça", "Quarta", "Quinta", "Sexta", "Sábado")


def weekday_name(day: date) -> str:
    """Plan day name for a calendar date."""

    return WEEKDAY_NAMES[day.isoweekday() % 7]


def filter_entries(
    entries: Iterable[PlannedMeal],
    period: Period,
    day: Optional[str] = None,
) -> List[PlannedMeal]:
    """Planned meals covered by ``period``.

    ``day`` is required for daily lists and ignored otherwise.
    """

    period = Period(period)
    entries = list(entries)
    if not entries:
        raise NothingToAggregateError("The meal plan is empty; add meals before generating a list.")
    if period is not Period.DAILY:
        return entries

    if not day:
        raise ValueError("A day is required for daily shopping lists")
    chosen = [entry for entry in entries if entry.day_name == day]
    if not chosen:
        raise NothingToAggregateError(
            f"The meal plan for {day} is empty; add meals to this day before generating a list."
        )
    return chosen


class PeriodSelector:
    """Turn planned meals into the triple list handed to :func:`aggregate`."""

    def __init__(self, recipes: RecipeSource):
        self._recipes = recipes

    def collect(
        self,
        entries: Sequence[PlannedMeal],
        period: Period,
        day: Optional[str] = None,
    ) -> List[IngredientTriple]:
        """Return scaled triples for ``period``.

        The monthly multiplier is applied to each triple here, before aggregation, so
        rounding only happens once on the final sum.
        """

        period = Period(period)
        multiplier = PERIOD_MULTIPLIERS[period]
        triples: List[IngredientTriple] = []
        for entry in filter_entries(entries, period, day):
            recipe = self._recipes.get_recipe(entry.recipe_id)
            if recipe is None:
                logger.warning(
                    "Skipping planned meal %s: recipe %s not found", entry.id, entry.recipe_id
                )
                continue
            for ingredient in recipe.ingredients:
                triples.append(
                    IngredientTriple(
                        name=ingredient.name,
                        quantity=ingredient.quantity * multiplier,
                        unit=ingredient.unit,
                    )
                )

        if not triples:
            raise NothingToAggregateError("The selected meals have no ingredients to shop for.")
        logger.info(
            "Collected %s ingredient(s) for %s list (multiplier=%s)",
            len(triples),
            period.value,
            multiplier,
        )
        return triples


__all__ = [
    "MONTHLY_MULTIPLIER",
    "PERIOD_MULTIPLIERS",
    "WEEKDAY_NAMES",
    "weekday_name",
    "filter_entries",
    "PeriodSelector",
]
