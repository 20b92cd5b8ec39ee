"""Unit conversion between recipe units, summation base units and display units."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

UnitKind = Literal["mass", "volume", "other"]

# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Mass conversions (base unit: g)
MASS_UNITS: dict[str, float] = {
    "g": 1.0,
    "grama": 1.0,
    "gramas": 1.0,
    "kg": 1000.0,
    "quilo": 1000.0,
    "quilos": 1000.0,
    "quilograma": 1000.0,
    "quilogramas": 1000.0,
}

# Volume conversions (base unit: ml)
VOLUME_UNITS: dict[str, float] = {
    "ml": 1.0,
    "mililitro": 1.0,
    "mililitros": 1.0,
    "l": 1000.0,
    "litro": 1000.0,
    "litros": 1000.0,
}

BASE_UNITS: dict[UnitKind, str] = {"mass": "g", "volume": "ml"}

# Base unit -> (threshold, display unit, divisor)
DISPLAY_UNITS: dict[str, tuple[float, str, float]] = {
    "g": (1000.0, "kg", 1000.0),
    "ml": (1000.0, "L", 1000.0),
}


@dataclass(frozen=True)
class Measure:
    """A quantity paired with its unit."""

    quantity: float
    unit: str


def unit_kind(unit: str) -> UnitKind:
    key = unit.strip().lower()
    if key in MASS_UNITS:
        return "mass"
    if key in VOLUME_UNITS:
        return "volume"
    return "other"


def to_base(quantity: float, unit: str) -> Measure:
    """Express ``quantity unit`` in the base unit used for summation.

    Mass goes to grams and volume to millilitres. Any unit outside those tables
    ("unidade", "colher", "maço", ...) is its own base unit and is returned untouched,
    so it only merges with the exact same spelling.
    """

    kind = unit_kind(unit)
    if kind == "mass":
        return Measure(quantity * MASS_UNITS[unit.strip().lower()], BASE_UNITS["mass"])
    if kind == "volume":
        return Measure(quantity * VOLUME_UNITS[unit.strip().lower()], BASE_UNITS["volume"])
    return Measure(quantity, unit)


def to_display(quantity: float, unit: str) -> Measure:
    """Promote large base quantities to kg / L for presentation."""

    if unit in DISPLAY_UNITS:
        threshold, display_unit, divisor = DISPLAY_UNITS[unit]
        if quantity >= threshold:
            return Measure(quantity / divisor, display_unit)
    return Measure(quantity, unit)


__all__ = [
    "MASS_UNITS",
    "VOLUME_UNITS",
    "Measure",
    "UnitKind",
    "unit_kind",
    "to_base",
    "to_display",
]
