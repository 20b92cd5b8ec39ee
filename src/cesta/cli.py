"""Command-line interface for Cesta."""

from __future__ import annotations

import json
from datetime import date
from typing import Any, NoReturn, Optional

import typer
from pydantic import TypeAdapter, ValidationError

from cesta.config import get_settings
from cesta.db.meals import list_planned_meals
from cesta.models.ingredients import IngredientTriple
from cesta.models.planning import Period
from cesta.recipes import default_recipe_source
from cesta.shopping.aggregator import aggregate as aggregate_triples
from cesta.shopping.errors import NothingToAggregateError
from cesta.shopping.groups import ShoppingGroupManager
from cesta.shopping.period import PeriodSelector, weekday_name

app = typer.Typer(help="Cesta shopping-list commands.")

_TRIPLES = TypeAdapter(list[IngredientTriple])


def _echo_json(payload: Any, pretty: bool) -> None:
    if pretty:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))
    else:
        typer.echo(json.dumps(payload, ensure_ascii=False))


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def aggregate(
    triples_path: str,
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Aggregate a JSON array of {name, quantity, unit} objects into a checklist.
    """
    with open(triples_path, "r", encoding="utf-8") as fh:
        payload = json.load(fh)

    try:
        triples = _TRIPLES.validate_python(payload)
    except ValidationError as exc:
        _fail(f"Invalid ingredient list: {exc}")

    items = aggregate_triples(triples)
    _echo_json([item.model_dump(mode="json") for item in items], pretty)


@app.command("shopping-list")
def shopping_list(
    period: Period = typer.Option(Period.WEEKLY, "--period", help="daily, weekly or monthly."),
    day: Optional[str] = typer.Option(
        None,
        "--day",
        help="Plan day for daily lists (e.g. Segunda). Defaults to today.",
    ),
    user: Optional[str] = typer.Option(None, "--user", help="User id; defaults to settings."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Aggregate the stored meal plan for a period."""

    user_id = user or get_settings().default_user_id
    if period is Period.DAILY and not day:
        day = weekday_name(date.today())

    selector = PeriodSelector(default_recipe_source(user_id))
    try:
        triples = selector.collect(list_planned_meals(user_id), period, day)
    except NothingToAggregateError as exc:
        _fail(str(exc))

    items = aggregate_triples(triples)
    _echo_json([item.model_dump(mode="json") for item in items], pretty)


@app.command()
def groups(
    user: Optional[str] = typer.Option(None, "--user", help="User id; defaults to settings."),
    history: bool = typer.Option(False, "--history", help="List concluded lists instead."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """List active shopping lists, or concluded ones with --history."""

    manager = ShoppingGroupManager(user or get_settings().default_user_id)
    found = manager.list_history() if history else manager.list_active_groups()
    _echo_json(
        [group.model_dump(mode="json", exclude={"items"}) for group in found],
        pretty,
    )


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the ``cesta`` console script."""
    app(prog_name="cesta", args=argv)


if __name__ == "__main__":
    main()
