from __future__ import annotations

import json

from typer.testing import CliRunner

from cesta.cli import app
from cesta.db.meals import add_planned_meal
from cesta.models.ingredients import AggregatedIngredient
from cesta.shopping.groups import ShoppingGroupManager

runner = CliRunner()


def test_aggregate_command(tmp_path):
    source = tmp_path / "triples.json"
    source.write_text(
        json.dumps(
            [
                {"name": "Leite", "quantity": 500, "unit": "ml"},
                {"name": "leite", "quantity": 600, "unit": "ml"},
            ]
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["aggregate", str(source)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [
        {"id": "leite", "name": "Leite", "quantity": 1.1, "unit": "L", "checked": True}
    ]


def test_aggregate_rejects_invalid_triples(tmp_path):
    source = tmp_path / "triples.json"
    source.write_text(json.dumps([{"name": "Sal", "quantity": 0, "unit": "g"}]), encoding="utf-8")

    result = runner.invoke(app, ["aggregate", str(source)])

    assert result.exit_code == 1


def test_shopping_list_command_uses_stored_plan():
    add_planned_meal("casa", day_name="Segunda", recipe_id="3")

    result = runner.invoke(app, ["shopping-list", "--period", "monthly", "--user", "casa"])

    assert result.exit_code == 0, result.output
    items = {item["id"]: item for item in json.loads(result.stdout)}
    assert items["mix de folhas"]["quantity"] == 400
    assert items["brócolis"]["quantity"] == 200


def test_shopping_list_command_reports_empty_day():
    add_planned_meal("casa", day_name="Segunda", recipe_id="3")

    result = runner.invoke(
        app, ["shopping-list", "--period", "daily", "--day", "Domingo", "--user", "casa"]
    )

    assert result.exit_code == 1
    assert "Domingo" in result.output


def test_groups_command_lists_active_and_history():
    manager = ShoppingGroupManager("casa")
    manager.create_group(
        "Feira",
        [AggregatedIngredient(id="arroz", name="Arroz", quantity=1, unit="kg")],
    )

    result = runner.invoke(app, ["groups", "--user", "casa"])
    assert result.exit_code == 0, result.output
    listed = json.loads(result.stdout)
    assert [group["display_name"] for group in listed] == ["Feira"]
    assert "items" not in listed[0]

    result = runner.invoke(app, ["groups", "--user", "casa", "--history"])
    assert json.loads(result.stdout) == []
