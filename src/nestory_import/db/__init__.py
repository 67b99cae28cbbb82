"""Persistence stores used by the import orchestrator."""

from .store import InMemoryInventoryStore, InventoryStore, ItemRecord, NamedEntity, StoreError

__all__ = [
    "InMemoryInventoryStore",
    "InventoryStore",
    "ItemRecord",
    "NamedEntity",
    "StoreError",
]
