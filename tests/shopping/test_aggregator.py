from __future__ import annotations

import pytest
from pydantic import ValidationError

from cesta.models.ingredients import AggregatedIngredient, IngredientTriple
from cesta.shopping.aggregator import aggregate, selected, toggle


def _triples(*rows):
    return [IngredientTriple(name=name, quantity=quantity, unit=unit) for name, quantity, unit in rows]


def test_same_identity_in_grams_merges_and_promotes_to_kg():
    result = aggregate(_triples(("Farinha de trigo", 450, "g"), ("farinha de trigo", 600, "g")))

    assert result == [
        AggregatedIngredient(
            id="farinha de trigo",
            name="Farinha de trigo",
            quantity=1.05,
            unit="kg",
            checked=True,
        )
    ]


def test_same_identity_in_ml_merges_and_promotes_to_litres():
    result = aggregate(_triples(("Leite", 500, "ml"), ("leite", 600, "ml")))

    assert len(result) == 1
    assert result[0].name == "Leite"
    assert result[0].quantity == pytest.approx(1.1)
    assert result[0].unit == "L"
    assert result[0].checked is True


def test_mixed_mass_units_sum_in_grams():
    result = aggregate(_triples(("Arroz", 1, "kg"), ("arroz", 250, "g")))

    assert [(item.quantity, item.unit) for item in result] == [(1.25, "kg")]


def test_incompatible_units_stay_separate():
    result = aggregate(
        _triples(("Ovo", 2, "unidade"), ("ovo", 50, "g"), ("Ovo", 1, "unidade"))
    )

    by_id = {item.id: item for item in result}
    assert set(by_id) == {"ovo", "ovo_g"}
    assert by_id["ovo"].quantity == 3
    assert by_id["ovo"].unit == "unidade"
    assert by_id["ovo_g"].quantity == 50
    assert by_id["ovo_g"].unit == "g"


def test_unrecognized_units_only_merge_with_identical_spelling():
    result = aggregate(_triples(("Azeite", 1, "colher"), ("azeite", 2, "colher de sopa")))

    assert len(result) == 2


def test_article_prefix_does_not_split_identity():
    result = aggregate(_triples(("A cebola", 1, "un"), ("Cebola", 2, "un")))

    assert len(result) == 1
    assert result[0].quantity == 3


def test_output_sorted_case_insensitively():
    result = aggregate(_triples(("tomate", 1, "un"), ("Alho", 2, "un"), ("batata", 300, "g")))

    assert [item.name for item in result] == ["Alho", "batata", "tomate"]


def test_accented_names_sort_with_their_base_letter():
    result = aggregate(
        _triples(("Tomate", 1, "un"), ("Água", 1, "l"), ("Azeite", 500, "ml"), ("Açúcar", 1, "kg"))
    )

    assert [item.name for item in result] == ["Açúcar", "Água", "Azeite", "Tomate"]


def test_rounds_only_final_quantity():
    result = aggregate(_triples(*[("Sal", 0.333, "g")] * 3))

    assert result[0].quantity == pytest.approx(1.0)


def test_tiny_quantity_never_rounds_to_zero():
    result = aggregate(_triples(("Fermento", 0.004, "un")))

    assert result[0].quantity == pytest.approx(0.01)
    assert result[0].quantity > 0


def test_empty_input_yields_empty_list():
    assert aggregate([]) == []


@pytest.mark.parametrize("quantity", [0, -1, float("nan")])
def test_invalid_triples_are_rejected_before_aggregation(quantity):
    with pytest.raises(ValidationError):
        IngredientTriple(name="Sal", quantity=quantity, unit="g")


def test_blank_names_are_rejected():
    with pytest.raises(ValidationError):
        IngredientTriple(name="   ", quantity=1, unit="g")


def test_toggle_and_selected():
    items = aggregate(_triples(("Alho", 2, "un"), ("Tomate", 1, "un")))

    toggled = toggle(items, "alho")
    assert [item.id for item in selected(toggled)] == ["tomate"]
    assert items[0].checked is True

    restored = toggle(toggled, "alho")
    assert len(selected(restored)) == 2


def test_toggle_unknown_id_raises():
    with pytest.raises(KeyError):
        toggle([], "alho")
