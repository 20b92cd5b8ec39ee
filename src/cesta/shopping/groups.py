"""Naming and lifecycle of persisted shopping lists ("groups").

A group moves through three states:

* ``DRAFT``: started by the user, known only to the caller, nothing stored.
* ``ACTIVE``: at least one item stored under its key; items may change.
* ``CONCLUDED``: every item was purchased and the user finished the list. Read-only
  history; there is no way back.

Groups have no row of their own. All of a group's items carry its serialized
:class:`~cesta.models.shopping.GroupKey`, and group-wide changes (rename, complete,
delete) are single statements against the store.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable, List, Mapping, Optional, Protocol, Sequence, Union

from cesta import metrics
from cesta.db import shopping_items
from cesta.models.ingredients import AggregatedIngredient, IngredientTriple
from cesta.models.shopping import GroupKey, GroupState, ShoppingGroup, ShoppingItem
from cesta.shopping.aggregator import selected
from cesta.shopping.errors import (
    DuplicateGroupNameError,
    GroupConcludedError,
    GroupNotFoundError,
    InvalidGroupNameError,
    ItemNotFoundError,
    NoItemsSelectedError,
    NotAllPurchasedError,
)
from cesta.shopping.identity import collation_key

logger = logging.getLogger(__name__)

GroupRef = Union[GroupKey, str]

DEFAULT_ITEM_UNIT = "un"

_UNSET = object()


class ShoppingStore(Protocol):
    """Row operations the manager needs from the persistent store."""

    def insert_items(
        self, user_id: str, group_key: str, items: Sequence[Mapping[str, object]]
    ) -> List[ShoppingItem]:
        ...

    def select_items(self, user_id: str, group_key: str) -> List[ShoppingItem]:
        ...

    def select_items_by_prefix(
        self, user_id: str, prefix: str, *, concluded: Optional[bool] = None
    ) -> List[ShoppingItem]:
        ...

    def update_group(self, user_id: str, group_key: str, **changes: object) -> int:
        ...

    def delete_group(self, user_id: str, group_key: str) -> int:
        ...

    def update_item(self, user_id: str, group_key: str, item_id: int, **changes: object) -> ShoppingItem:
        ...

    def delete_item(self, user_id: str, group_key: str, item_id: int) -> None:
        ...


def _now_millis() -> int:
    return int(time.time() * 1000)


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidGroupNameError("Shopping list name cannot be empty")
    return cleaned


def _build_group(key: GroupKey, items: Sequence[ShoppingItem]) -> ShoppingGroup:
    state = GroupState.CONCLUDED if all(item.concluded for item in items) else GroupState.ACTIVE
    return ShoppingGroup(
        key=key,
        state=state,
        items=list(items),
        created_at=min(item.created_at for item in items),
    )


def _creation_order(group: ShoppingGroup) -> tuple:
    # Row timestamps have second resolution; the key suffix breaks ties.
    suffix = group.key.suffix
    return (group.created_at, int(suffix) if suffix.isdigit() else 0)


def _group_rows(rows: Sequence[ShoppingItem]) -> "OrderedDict[str, List[ShoppingItem]]":
    grouped: "OrderedDict[str, List[ShoppingItem]]" = OrderedDict()
    for row in rows:
        grouped.setdefault(row.group_key, []).append(row)
    return grouped


class ShoppingGroupManager:
    """Create, rename, complete and delete one user's shopping groups.

    Duplicate display names are a decision point rather than an error: create and
    rename raise :class:`DuplicateGroupNameError` until called again with
    ``confirm_duplicate=True``. Store failures propagate untouched and are never
    retried here, since retrying a create could persist the same list twice.
    """

    def __init__(
        self,
        user_id: str,
        store: Optional[ShoppingStore] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.user_id = user_id
        self._store: ShoppingStore = store or shopping_items  # type: ignore[assignment]
        self._clock = clock or _now_millis

    # ------------------------------------------------------------------ queries

    def get_group(self, group: GroupRef) -> ShoppingGroup:
        key = self._coerce_key(group)
        items = self._store.select_items(self.user_id, str(key))
        if not items:
            raise GroupNotFoundError(str(key))
        return _build_group(key, items)

    def list_active_groups(self) -> List[ShoppingGroup]:
        """Groups still being shopped, sorted by display name."""

        rows = self._store.select_items_by_prefix(self.user_id, "", concluded=False)
        groups = self._groups_from_rows(rows)
        return sorted(groups, key=lambda group: collation_key(group.display_name))

    def list_history(self) -> List[ShoppingGroup]:
        """Concluded groups, newest first."""

        rows = self._store.select_items_by_prefix(self.user_id, "", concluded=True)
        groups = self._groups_from_rows(rows)
        return sorted(groups, key=_creation_order, reverse=True)

    def find_active_by_name(self, display_name: str, *, exclude: Optional[str] = None) -> List[str]:
        """Keys of active groups whose display name is exactly ``display_name``."""

        rows = self._store.select_items_by_prefix(
            self.user_id, GroupKey.prefix_for(display_name), concluded=False
        )
        keys = []
        for raw_key in _group_rows(rows):
            if raw_key == exclude:
                continue
            try:
                if GroupKey.parse(raw_key).display_name != display_name:
                    continue
            except ValueError:
                continue
            keys.append(raw_key)
        return keys

    # ---------------------------------------------------------------- lifecycle

    def create_group(
        self,
        name: str,
        items: Sequence[AggregatedIngredient],
        *,
        confirm_duplicate: bool = False,
    ) -> GroupKey:
        """Persist the checked ``items`` as a new group named ``name``."""

        display_name = _clean_name(name)
        chosen = selected(items)
        if not chosen:
            self._count("create", "no_items")
            raise NoItemsSelectedError("No items selected to add to the shopping list")
        self._check_duplicate("create", display_name, confirm_duplicate)

        key = self._unique_key(display_name)
        self._store.insert_items(
            self.user_id,
            str(key),
            [
                {"name": item.name, "quantity": item.quantity, "unit": item.unit, "purchased": False}
                for item in chosen
            ],
        )
        self._count("create", "ok")
        logger.info(
            "Created shopping list %s with %s item(s)",
            key,
            len(chosen),
            extra={"group_key": str(key), "user_id": self.user_id},
        )
        return key

    def start_draft(self, name: str, *, confirm_duplicate: bool = False) -> ShoppingGroup:
        """Begin a manual list; it is stored once the first item is added."""

        display_name = _clean_name(name)
        self._check_duplicate("draft", display_name, confirm_duplicate)
        return ShoppingGroup(key=self._unique_key(display_name), state=GroupState.DRAFT)

    def add_item(
        self,
        group: Union[ShoppingGroup, GroupRef],
        name: str,
        quantity: float = 1.0,
        unit: str = DEFAULT_ITEM_UNIT,
        price: Optional[float] = None,
        *,
        confirm_duplicate: bool = False,
    ) -> ShoppingGroup:
        """Append an unpurchased item; a draft group becomes active on its first item.

        The duplicate-name check runs again when a draft is first stored, since another
        list with the same name may have been created after the draft was started.
        """

        line = IngredientTriple(name=name, quantity=quantity, unit=unit or DEFAULT_ITEM_UNIT)
        if price is not None and price < 0:
            raise ValueError("Item price cannot be negative")
        if isinstance(group, ShoppingGroup) and group.state is GroupState.DRAFT:
            key = group.key
            existing = self._store.select_items(self.user_id, str(key))
            if not existing:
                self._check_duplicate("draft", key.display_name, confirm_duplicate, exclude=str(key))
            elif _build_group(key, existing).concluded:
                raise GroupConcludedError(str(key))
        else:
            key = group.key if isinstance(group, ShoppingGroup) else self._coerce_key(group)
            self._require_active(key)

        self._store.insert_items(
            self.user_id,
            str(key),
            [
                {
                    "name": line.name,
                    "quantity": line.quantity,
                    "unit": line.unit,
                    "purchased": False,
                    "price_informed": price,
                }
            ],
        )
        logger.info("Added %r to shopping list %s", line.name, key, extra={"group_key": str(key)})
        return self.get_group(key)

    def rename_group(
        self,
        group: GroupRef,
        new_name: str,
        *,
        confirm_duplicate: bool = False,
    ) -> GroupKey:
        """Change the display name, keeping the key's creation suffix."""

        key = self._coerce_key(group)
        display_name = _clean_name(new_name)
        self._require_active(key, operation="rename")
        if display_name == key.display_name:
            return key
        self._check_duplicate("rename", display_name, confirm_duplicate, exclude=str(key))

        new_key = key.renamed(display_name)
        if self._store.select_items(self.user_id, str(new_key)):
            # Another group was created in the same millisecond under this name.
            logger.warning("Key %s already in use; assigning a fresh suffix", new_key)
            new_key = self._unique_key(display_name)

        moved = self._store.update_group(self.user_id, str(key), new_key=str(new_key))
        self._count("rename", "ok")
        logger.info(
            "Renamed shopping list %s to %s (%s item(s))",
            key,
            new_key,
            moved,
            extra={"group_key": str(new_key), "user_id": self.user_id},
        )
        return new_key

    def complete_group(self, group: GroupRef) -> ShoppingGroup:
        """Conclude a group whose items have all been purchased."""

        key = self._coerce_key(group)
        current = self._require_active(key, operation="complete")
        pending = sum(1 for item in current.items if not item.purchased)
        if pending:
            self._count("complete", "not_all_purchased")
            logger.warning(
                "Refusing to conclude %s: %s item(s) not purchased",
                key,
                pending,
                extra={"group_key": str(key)},
            )
            raise NotAllPurchasedError(str(key), pending)

        self._store.update_group(self.user_id, str(key), concluded=True)
        self._count("complete", "ok")
        logger.info("Concluded shopping list %s", key, extra={"group_key": str(key)})
        return self.get_group(key)

    def delete_group(self, group: GroupRef) -> None:
        """Remove every item of the group. Deleting a missing group is a no-op."""

        key = str(group)
        removed = self._store.delete_group(self.user_id, key)
        self._count("delete", "ok" if removed else "absent")
        logger.info("Deleted shopping list %s (%s item(s))", key, removed, extra={"group_key": key})

    # -------------------------------------------------------------------- items

    def set_purchased(self, group: GroupRef, item_id: int, purchased: bool = True) -> ShoppingItem:
        return self.update_item(group, item_id, purchased=purchased)

    def update_item(
        self,
        group: GroupRef,
        item_id: int,
        *,
        name: str | object = _UNSET,
        quantity: float | object = _UNSET,
        unit: str | object = _UNSET,
        purchased: bool | object = _UNSET,
        price: float | None | object = _UNSET,
    ) -> ShoppingItem:
        """Edit one item in place. Omitted fields are left unchanged."""

        key = self._coerce_key(group)
        self._require_item(self._require_active(key), item_id)

        changes: dict[str, object] = {}
        if name is not _UNSET:
            if not str(name).strip():
                raise ValueError("Item name cannot be empty")
            changes["name"] = name
        if quantity is not _UNSET:
            if float(quantity) <= 0:  # type: ignore[arg-type]
                raise ValueError("Item quantity must be positive")
            changes["quantity"] = quantity
        if unit is not _UNSET:
            changes["unit"] = unit
        if purchased is not _UNSET:
            changes["purchased"] = purchased
        if price is not _UNSET:
            if price is not None and float(price) < 0:  # type: ignore[arg-type]
                raise ValueError("Item price cannot be negative")
            changes["price_informed"] = price
        return self._store.update_item(self.user_id, str(key), item_id, **changes)

    def remove_item(self, group: GroupRef, item_id: int) -> None:
        key = self._coerce_key(group)
        self._require_item(self._require_active(key), item_id)
        self._store.delete_item(self.user_id, str(key), item_id)
        logger.info("Removed item %s from shopping list %s", item_id, key, extra={"group_key": str(key)})

    # ------------------------------------------------------------------ helpers

    def _coerce_key(self, group: GroupRef) -> GroupKey:
        if isinstance(group, GroupKey):
            return group
        try:
            return GroupKey.parse(group)
        except ValueError as exc:
            raise GroupNotFoundError(str(group)) from exc

    def _require_active(self, key: GroupKey, operation: str = "edit") -> ShoppingGroup:
        current = self.get_group(key)
        if current.concluded:
            self._count(operation, "concluded")
            logger.warning(
                "Rejected %s on concluded shopping list %s",
                operation,
                key,
                extra={"group_key": str(key)},
            )
            raise GroupConcludedError(str(key))
        return current

    @staticmethod
    def _require_item(group: ShoppingGroup, item_id: int) -> ShoppingItem:
        for item in group.items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(group.group_key, item_id)

    def _check_duplicate(
        self,
        operation: str,
        display_name: str,
        confirmed: bool,
        exclude: Optional[str] = None,
    ) -> None:
        existing = self.find_active_by_name(display_name, exclude=exclude)
        if not existing:
            return
        if not confirmed:
            self._count(operation, "duplicate")
            raise DuplicateGroupNameError(display_name, existing)
        logger.info(
            "Proceeding with duplicate shopping list name %r (%s existing)",
            display_name,
            len(existing),
        )

    def _unique_key(self, display_name: str) -> GroupKey:
        suffix = self._clock()
        key = GroupKey(display_name=display_name, suffix=str(suffix))
        while self._store.select_items(self.user_id, str(key)):
            suffix += 1
            key = GroupKey(display_name=display_name, suffix=str(suffix))
        return key

    def _groups_from_rows(self, rows: Sequence[ShoppingItem]) -> List[ShoppingGroup]:
        groups = []
        for raw_key, items in _group_rows(rows).items():
            try:
                key = GroupKey.parse(raw_key)
            except ValueError:
                logger.warning("Ignoring shopping items with malformed group key %r", raw_key)
                continue
            groups.append(_build_group(key, items))
        return groups

    @staticmethod
    def _count(operation: str, outcome: str) -> None:
        metrics.GROUP_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


__all__ = ["ShoppingStore", "ShoppingGroupManager", "GroupRef", "DEFAULT_ITEM_UNIT"]
