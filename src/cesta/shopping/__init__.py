"""Shopping engine: ingredient aggregation and shopping group lifecycle."""

from cesta.shopping.aggregator import aggregate, selected, toggle
from cesta.shopping.errors import (
    DuplicateGroupNameError,
    GroupConcludedError,
    GroupNotFoundError,
    InvalidGroupNameError,
    ItemNotFoundError,
    NoItemsSelectedError,
    NotAllPurchasedError,
    NothingToAggregateError,
    ShoppingError,
)
from cesta.shopping.groups import ShoppingGroupManager
from cesta.shopping.identity import normalize_name
from cesta.shopping.period import MONTHLY_MULTIPLIER, PeriodSelector, weekday_name
from cesta.shopping.units import to_base, to_display

__all__ = [
    "aggregate",
    "selected",
    "toggle",
    "DuplicateGroupNameError",
    "GroupConcludedError",
    "GroupNotFoundError",
    "InvalidGroupNameError",
    "ItemNotFoundError",
    "NoItemsSelectedError",
    "NotAllPurchasedError",
    "NothingToAggregateError",
    "ShoppingError",
    "ShoppingGroupManager",
    "normalize_name",
    "MONTHLY_MULTIPLIER",
    "PeriodSelector",
    "weekday_name",
    "to_base",
    "to_display",
]
