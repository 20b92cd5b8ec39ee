"""Ingredient name canonicalization and display ordering."""

from __future__ import annotations

import unicodedata

ARTICLES = frozenset({"o", "a", "os", "as", "um", "uma"})


def normalize_name(name: str) -> str:
    """Return the comparison key for an ingredient display name.

    Lower-cases, trims, collapses whitespace and drops leading Portuguese articles, so
    "Farinha de trigo" and " a farinha  de trigo" collide. No stemming is attempted.
    A name made only of an article is returned as that article.
    """

    tokens = name.lower().split()
    while len(tokens) > 1 and tokens[0] in ARTICLES:
        tokens.pop(0)
    return " ".join(tokens)


def collation_key(name: str) -> tuple[str, str]:
    """Sort key placing accented names beside their unaccented letters.

    "Açúcar" and "Água" sort among the other "a" names instead of after "z". The
    lower-cased name breaks ties between spellings that differ only in accents.
    """

    decomposed = unicodedata.normalize("NFKD", name.casefold())
    folded = "".join(char for char in decomposed if not unicodedata.combining(char))
    return folded, name.lower()


__all__ = ["ARTICLES", "normalize_name", "collation_key"]
