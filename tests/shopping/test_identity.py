from __future__ import annotations

import pytest

from cesta.shopping.identity import collation_key, normalize_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Farinha de trigo", "farinha de trigo"),
        ("  farinha   de  trigo ", "farinha de trigo"),
        ("A farinha de trigo", "farinha de trigo"),
        ("os ovos", "ovos"),
        ("Uma cebola", "cebola"),
        ("Açúcar", "açúcar"),
    ],
)
def test_normalize_name(raw, expected):
    assert normalize_name(raw) == expected


def test_normalize_name_is_idempotent():
    once = normalize_name("  O   a Leite ")
    assert once == "leite"
    assert normalize_name(once) == once


def test_lone_article_is_kept():
    assert normalize_name("A") == "a"


def test_empty_name_normalizes_to_empty_string():
    assert normalize_name("   ") == ""


def test_no_stemming():
    assert normalize_name("Ovo") != normalize_name("Ovos")


def test_collation_key_folds_accents_and_case():
    names = ["Tomate", "azeite", "Água", "Açúcar", "Abacate"]

    assert sorted(names, key=collation_key) == ["Abacate", "Açúcar", "Água", "azeite", "Tomate"]


def test_collation_key_breaks_ties_between_accented_spellings():
    assert collation_key("Pao")[0] == collation_key("Pão")[0]
    assert collation_key("Pao") != collation_key("Pão")
