"""Shopping group models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

GROUP_KEY_SEPARATOR = " ::: "


class GroupKey(BaseModel):
    """Durable identifier of a shopping group.

    Serialized as ``"<display_name> ::: <suffix>"``; the suffix is the creation timestamp
    in milliseconds and is kept across renames, so two groups sharing a display name never
    share a key. ``str()`` and :meth:`parse` are the only conversions to and from the
    stored string.
    """

    display_name: str = Field(min_length=1)
    suffix: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.display_name}{GROUP_KEY_SEPARATOR}{self.suffix}"

    @classmethod
    def parse(cls, raw: str) -> "GroupKey":
        name, separator, suffix = raw.rpartition(GROUP_KEY_SEPARATOR)
        if not separator or not name or not suffix:
            raise ValueError(f"Malformed group key {raw!r}")
        return cls(display_name=name, suffix=suffix)

    @classmethod
    def prefix_for(cls, display_name: str) -> str:
        """Stored-key prefix shared by every group with this display name."""

        return f"{display_name}{GROUP_KEY_SEPARATOR}"

    def renamed(self, display_name: str) -> "GroupKey":
        return GroupKey(display_name=display_name, suffix=self.suffix)


class GroupState(str, Enum):
    """Lifecycle of a group: drafts live only client-side, concluded groups are history."""

    DRAFT = "draft"
    ACTIVE = "active"
    CONCLUDED = "concluded"


class ShoppingItem(BaseModel):
    """Persisted line of a shopping group."""

    id: int
    group_key: str
    name: str
    quantity: float
    unit: str
    purchased: bool = Field(default=False)
    price_informed: Optional[float] = Field(default=None, ge=0)
    concluded: bool = Field(default=False)
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class ShoppingGroup(BaseModel):
    """A named shopping list and its items."""

    key: GroupKey
    state: GroupState
    items: list[ShoppingItem] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(default=None)

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def group_key(self) -> str:
        return str(self.key)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        return self.key.display_name

    @computed_field  # type: ignore[prop-decorator]
    @property
    def item_count(self) -> int:
        return len(self.items)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def purchased_count(self) -> int:
        return sum(1 for item in self.items if item.purchased)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_price(self) -> float:
        return round(sum(item.price_informed or 0.0 for item in self.items), 2)

    @property
    def concluded(self) -> bool:
        return self.state is GroupState.CONCLUDED

    @property
    def all_purchased(self) -> bool:
        return bool(self.items) and all(item.purchased for item in self.items)


__all__ = [
    "GROUP_KEY_SEPARATOR",
    "GroupKey",
    "GroupState",
    "ShoppingItem",
    "ShoppingGroup",
]
