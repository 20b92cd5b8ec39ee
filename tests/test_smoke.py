"""Basic smoke tests for scaffolding."""

from cesta.models.ingredients import IngredientTriple
from cesta.shopping import ShoppingGroupManager, aggregate


def test_generated_list_can_be_saved_as_group() -> None:
    checklist = aggregate(
        [
            IngredientTriple(name="Farinha de trigo", quantity=450, unit="g"),
            IngredientTriple(name="farinha de trigo", quantity=600, unit="g"),
        ]
    )

    manager = ShoppingGroupManager("smoke")
    key = manager.create_group("Feira", checklist)
    group = manager.get_group(key)

    assert group.display_name == "Feira"
    assert [(item.name, item.quantity, item.unit) for item in group.items] == [
        ("Farinha de trigo", 1.05, "kg")
    ]
