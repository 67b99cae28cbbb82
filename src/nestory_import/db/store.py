from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from ..models.validated_row import ItemCondition

"""Persistence collaborator contract for the import orchestrator.

The orchestrator needs three things from a store:
- reference lookups (categories, rooms), fetched once per import
- per-item creation, which may raise StoreError for that item only
- one terminal commit (all-or-nothing) and a rollback for cancellation

InMemoryInventoryStore implements the contract without a database; it backs the
CLI mock mode and the tests.
"""

__all__ = [
    "StoreError",
    "NamedEntity",
    "ItemRecord",
    "InventoryStore",
    "InMemoryInventoryStore",
]


class StoreError(Exception):
    """Raised by stores when an item cannot be created or the commit fails."""


@dataclass(frozen=True)
class NamedEntity:
    """Existing reference entity (category or room)."""
    id: Any
    name: str


@dataclass(frozen=True)
class ItemRecord:
    """Fully formed item passed to InventoryStore.create_item."""
    name: str
    brand: str | None = None
    model_number: str | None = None
    serial_number: str | None = None
    purchase_price: Decimal | None = None
    purchase_date: date | None = None
    warranty_expiration: date | None = None
    condition: ItemCondition = ItemCondition.GOOD
    notes: str | None = None
    category_id: Any | None = None
    room_id: Any | None = None


@runtime_checkable
class InventoryStore(Protocol):
    def fetch_categories(self) -> list[NamedEntity]: ...

    def fetch_rooms(self) -> list[NamedEntity]: ...

    def create_item(self, record: ItemRecord) -> Any: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class InMemoryInventoryStore:
    """Dict-backed store. Created items are staged until commit().

    Single writer only; no locking.
    """

    def __init__(
        self,
        categories: list[NamedEntity] | None = None,
        rooms: list[NamedEntity] | None = None,
    ) -> None:
        self.categories: list[NamedEntity] = list(categories or [])
        self.rooms: list[NamedEntity] = list(rooms or [])
        self.items: dict[uuid.UUID, ItemRecord] = {}
        self._pending: dict[uuid.UUID, ItemRecord] = {}
        self.commit_count = 0

    @classmethod
    def with_names(
        cls, categories: list[str] | None = None, rooms: list[str] | None = None
    ) -> InMemoryInventoryStore:
        """Convenience constructor assigning sequential integer ids."""
        return cls(
            categories=[NamedEntity(i, n) for i, n in enumerate(categories or [], start=1)],
            rooms=[NamedEntity(i, n) for i, n in enumerate(rooms or [], start=1)],
        )

    @property
    def pending(self) -> dict[uuid.UUID, ItemRecord]:
        return dict(self._pending)

    def fetch_categories(self) -> list[NamedEntity]:
        return list(self.categories)

    def fetch_rooms(self) -> list[NamedEntity]:
        return list(self.rooms)

    def create_item(self, record: ItemRecord) -> uuid.UUID:
        if not record.name.strip():
            raise StoreError("item name must not be empty")
        item_id = uuid.uuid4()
        self._pending[item_id] = record
        return item_id

    def commit(self) -> None:
        self.items.update(self._pending)
        self._pending.clear()
        self.commit_count += 1

    def rollback(self) -> None:
        self._pending.clear()
