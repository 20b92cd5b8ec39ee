"""Shopping item persistence helpers.

A shopping group has no table of its own: it is the set of a user's rows sharing a
``group_key``. Every function here is a single transaction, so a group-wide update or
delete either applies to all of the group's rows or to none.
"""
# mypy: ignore-errors

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from sqlalchemy import delete, func, select, update

from cesta.models.shopping import ShoppingItem

from .models import ShoppingItemORM
from .repository import session_scope

_UNSET = object()


def _to_model(row: ShoppingItemORM) -> ShoppingItem:
    return ShoppingItem.model_validate(
        {
            "id": row.id,
            "group_key": row.group_key,
            "name": row.name,
            "quantity": row.quantity,
            "unit": row.unit,
            "purchased": row.purchased,
            "price_informed": row.price_informed,
            "concluded": row.concluded,
            "created_at": row.created_at,
        }
    )


def _ordered():
    return (ShoppingItemORM.created_at.asc(), ShoppingItemORM.id.asc())


def insert_items(
    user_id: str,
    group_key: str,
    items: Sequence[Mapping[str, object]],
) -> List[ShoppingItem]:
    """Insert ``items`` under ``group_key`` in one transaction."""

    with session_scope() as session:
        rows = [
            ShoppingItemORM(
                user_id=user_id,
                group_key=group_key,
                name=str(item["name"]).strip(),
                quantity=float(item.get("quantity", 1.0)),
                unit=str(item.get("unit") or "un").strip(),
                purchased=bool(item.get("purchased", False)),
                price_informed=item.get("price_informed"),
                concluded=False,
            )
            for item in items
        ]
        session.add_all(rows)
        session.flush()
        return [_to_model(row) for row in rows]


def select_items(user_id: str, group_key: str) -> List[ShoppingItem]:
    """Return the rows of one group in insertion order."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(ShoppingItemORM)
                .where(
                    ShoppingItemORM.user_id == user_id,
                    ShoppingItemORM.group_key == group_key,
                )
                .order_by(*_ordered())
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def select_items_by_prefix(
    user_id: str,
    prefix: str,
    *,
    concluded: Optional[bool] = None,
) -> List[ShoppingItem]:
    """Return rows whose group key starts with ``prefix`` (case-sensitive).

    ``LIKE`` is case-insensitive in SQLite, so the prefix is compared with ``substr``.
    """

    with session_scope() as session:
        stmt = select(ShoppingItemORM).where(ShoppingItemORM.user_id == user_id)
        if prefix:
            stmt = stmt.where(func.substr(ShoppingItemORM.group_key, 1, len(prefix)) == prefix)
        if concluded is not None:
            stmt = stmt.where(ShoppingItemORM.concluded == concluded)
        rows = session.execute(stmt.order_by(*_ordered())).scalars().all()
        return [_to_model(row) for row in rows]


def update_group(
    user_id: str,
    group_key: str,
    *,
    new_key: str | object = _UNSET,
    concluded: bool | object = _UNSET,
) -> int:
    """Apply the same change to every row of a group; return the number of rows touched."""

    values: dict[str, object] = {}
    if new_key is not _UNSET:
        values["group_key"] = str(new_key)
    if concluded is not _UNSET:
        values["concluded"] = bool(concluded)
    if not values:
        return 0

    with session_scope() as session:
        result = session.execute(
            update(ShoppingItemORM)
            .where(
                ShoppingItemORM.user_id == user_id,
                ShoppingItemORM.group_key == group_key,
            )
            .values(**values)
        )
        return result.rowcount or 0


def delete_group(user_id: str, group_key: str) -> int:
    """Delete every row of a group; deleting an absent group removes nothing."""

    with session_scope() as session:
        result = session.execute(
            delete(ShoppingItemORM).where(
                ShoppingItemORM.user_id == user_id,
                ShoppingItemORM.group_key == group_key,
            )
        )
        return result.rowcount or 0


def _get_row(session, user_id: str, group_key: str, item_id: int) -> Optional[ShoppingItemORM]:
    return session.execute(
        select(ShoppingItemORM).where(
            ShoppingItemORM.id == item_id,
            ShoppingItemORM.user_id == user_id,
            ShoppingItemORM.group_key == group_key,
        )
    ).scalar_one_or_none()


def get_item(user_id: str, group_key: str, item_id: int) -> Optional[ShoppingItem]:
    with session_scope() as session:
        row = _get_row(session, user_id, group_key, item_id)
        if row is None:
            return None
        return _to_model(row)


def update_item(
    user_id: str,
    group_key: str,
    item_id: int,
    *,
    name: str | object = _UNSET,
    quantity: float | object = _UNSET,
    unit: str | object = _UNSET,
    purchased: bool | object = _UNSET,
    price_informed: float | None | object = _UNSET,
) -> ShoppingItem:
    with session_scope() as session:
        row = _get_row(session, user_id, group_key, item_id)
        if row is None:
            raise ValueError(f"Shopping item {item_id} not found in {group_key!r}")

        if name is not _UNSET:
            row.name = str(name).strip()
        if quantity is not _UNSET:
            row.quantity = float(quantity)
        if unit is not _UNSET:
            row.unit = str(unit).strip() or "un"
        if purchased is not _UNSET:
            row.purchased = bool(purchased)
        if price_informed is not _UNSET:
            row.price_informed = float(price_informed) if price_informed is not None else None

        session.flush()
        return _to_model(row)


def delete_item(user_id: str, group_key: str, item_id: int) -> None:
    with session_scope() as session:
        row = _get_row(session, user_id, group_key, item_id)
        if row is None:
            raise ValueError(f"Shopping item {item_id} not found in {group_key!r}")
        session.delete(row)


__all__ = [
    "insert_items",
    "select_items",
    "select_items_by_prefix",
    "update_group",
    "delete_group",
    "get_item",
    "update_item",
    "delete_item",
]
