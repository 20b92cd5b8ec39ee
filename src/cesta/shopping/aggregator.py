"""Merge ingredient triples from many recipes into one shopping checklist."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from cesta import metrics
from cesta.models.ingredients import AggregatedIngredient, IngredientTriple
from cesta.shopping.identity import collation_key, normalize_name
from cesta.shopping.units import to_base, to_display

logger = logging.getLogger(__name__)

DISPLAY_DECIMALS = 2
MIN_QUANTITY = 0.01


@dataclass
class _Bucket:
    id: str
    name: str
    quantity: float
    unit: str


def aggregate(triples: Sequence[IngredientTriple]) -> List[AggregatedIngredient]:
    """Sum same-identity ingredients and return the checklist sorted by name.

    Triples merge when their normalized names match and their base units agree. The
    first base unit seen for a name owns the plain key; any other base unit for that
    name gets its own entry keyed ``"<name>_<unit>"``, so grams and millilitres (or
    "unidade") are never summed together. Quantities stay in base units until every
    triple is consumed, then each entry is converted for display and rounded once. Rounding never
    shows less than ``MIN_QUANTITY``, so a tiny positive amount stays on the list.
    Input is assumed validated: positive quantities and non-blank names.
    """

    buckets: dict[tuple[str, str], _Bucket] = {}
    primary_unit: dict[str, str] = {}

    for triple in triples:
        key = normalize_name(triple.name)
        base = to_base(triple.quantity, triple.unit)

        bucket = buckets.get((key, base.unit))
        if bucket is not None:
            bucket.quantity += base.quantity
            continue

        owner = primary_unit.setdefault(key, base.unit)
        bucket_id = key if owner == base.unit else f"{key}_{base.unit}"
        if bucket_id != key:
            logger.debug(
                "Keeping %r in %s apart from %s entry", triple.name, base.unit, owner
            )
        buckets[(key, base.unit)] = _Bucket(
            id=bucket_id,
            name=triple.name,
            quantity=base.quantity,
            unit=base.unit,
        )

    metrics.INGREDIENTS_AGGREGATED.inc(len(triples))

    aggregated = []
    for bucket in buckets.values():
        shown = to_display(bucket.quantity, bucket.unit)
        aggregated.append(
            AggregatedIngredient(
                id=bucket.id,
                name=bucket.name,
                quantity=max(round(shown.quantity, DISPLAY_DECIMALS), MIN_QUANTITY),
                unit=shown.unit,
                checked=True,
            )
        )
    aggregated.sort(key=lambda item: collation_key(item.name))
    logger.debug("Aggregated %s triple(s) into %s item(s)", len(triples), len(aggregated))
    return aggregated


def selected(items: Iterable[AggregatedIngredient]) -> List[AggregatedIngredient]:
    """Items the user kept checked."""

    return [item for item in items if item.checked]


def toggle(items: Sequence[AggregatedIngredient], ingredient_id: str) -> List[AggregatedIngredient]:
    """Return a copy of ``items`` with one entry's ``checked`` flag flipped."""

    if not any(item.id == ingredient_id for item in items):
        raise KeyError(ingredient_id)
    return [
        item.model_copy(update={"checked": not item.checked}) if item.id == ingredient_id else item
        for item in items
    ]


__all__ = ["DISPLAY_DECIMALS", "MIN_QUANTITY", "aggregate", "selected", "toggle"]
