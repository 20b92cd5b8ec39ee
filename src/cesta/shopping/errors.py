"""Exceptions raised by the shopping engine.

Callers render each class differently: validation errors block the action, a duplicate
name asks the user to confirm, lifecycle errors explain why the group cannot change.
"""

from __future__ import annotations

from typing import Sequence


class ShoppingError(Exception):
    """Base class for shopping engine errors."""

    code = "SHOPPING_ERROR"


class NothingToAggregateError(ShoppingError, ValueError):
    """The requested period selects no planned meals."""

    code = "NOTHING_TO_AGGREGATE"


class NoItemsSelectedError(ShoppingError, ValueError):
    """Every aggregated ingredient was deselected."""

    code = "NO_ITEMS_SELECTED"


class InvalidGroupNameError(ShoppingError, ValueError):
    """Group display names must contain non-whitespace characters."""

    code = "INVALID_NAME"


class DuplicateGroupNameError(ShoppingError):
    """An active group already uses the requested display name."""

    code = "DUPLICATE_NAME"

    def __init__(self, name: str, existing: Sequence[str]):
        self.name = name
        self.existing = list(existing)
        super().__init__(f"An active shopping list named {name!r} already exists")


class GroupConcludedError(ShoppingError):
    """The group is concluded and therefore read-only."""

    code = "GROUP_CONCLUDED"

    def __init__(self, group_key: str):
        self.group_key = group_key
        super().__init__(f"Shopping list {group_key!r} is concluded and can no longer change")


class NotAllPurchasedError(ShoppingError):
    """Completion was requested while some items are still unpurchased."""

    code = "NOT_ALL_PURCHASED"

    def __init__(self, group_key: str, pending: int):
        self.group_key = group_key
        self.pending = pending
        super().__init__(f"Shopping list {group_key!r} still has {pending} item(s) to buy")


class GroupNotFoundError(ShoppingError, LookupError):
    code = "GROUP_NOT_FOUND"

    def __init__(self, group_key: str):
        self.group_key = group_key
        super().__init__(f"Shopping list {group_key!r} not found")


class ItemNotFoundError(ShoppingError, LookupError):
    code = "ITEM_NOT_FOUND"

    def __init__(self, group_key: str, item_id: int):
        self.group_key = group_key
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found in shopping list {group_key!r}")


__all__ = [
    "ShoppingError",
    "NothingToAggregateError",
    "NoItemsSelectedError",
    "InvalidGroupNameError",
    "DuplicateGroupNameError",
    "GroupConcludedError",
    "NotAllPurchasedError",
    "GroupNotFoundError",
    "ItemNotFoundError",
]
