from __future__ import annotations

import logging
import uuid
from typing import Any

from .batch_insert import BatchMetrics, batch_insert
from .store import ItemRecord, NamedEntity, StoreError

"""PostgreSQL-backed InventoryStore.

Expected tables::

    categories(id, name)
    rooms(id, name)
    items(id uuid, name, brand, model_number, serial_number, purchase_price numeric,
          purchase_date date, warranty_expiration date, condition text, notes text,
          category_id, room_id)

Items are staged client-side with generated UUIDs and written by commit() in one
BEGIN ... COMMIT block via execute_values. Any failure rolls the block back so
nothing becomes visible.
"""

__all__ = [
    "ITEM_COLUMNS",
    "PostgresInventoryStore",
]

logger = logging.getLogger(__name__)

ITEM_COLUMNS = (
    "id",
    "name",
    "brand",
    "model_number",
    "serial_number",
    "purchase_price",
    "purchase_date",
    "warranty_expiration",
    "condition",
    "notes",
    "category_id",
    "room_id",
)


class PostgresInventoryStore:
    """InventoryStore over a psycopg2 cursor.

    The connection is expected in autocommit mode; commit() issues its own
    BEGIN / COMMIT / ROLLBACK around the batch insert.
    """

    def __init__(
        self,
        cursor: Any,
        *,
        items_table: str = "items",
        categories_table: str = "categories",
        rooms_table: str = "rooms",
        page_size: int = 1000,
    ) -> None:
        self.cursor = cursor
        self.items_table = items_table
        self.categories_table = categories_table
        self.rooms_table = rooms_table
        self.page_size = page_size
        self._pending: list[tuple[Any, ...]] = []
        self.last_metrics: BatchMetrics | None = None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _fetch_named(self, table: str) -> list[NamedEntity]:
        try:
            self.cursor.execute(f"SELECT id, name FROM {table} ORDER BY name")
            return [NamedEntity(row[0], row[1]) for row in self.cursor.fetchall()]
        except Exception as e:
            raise StoreError(f"failed to read {table}: {e}") from e

    def fetch_categories(self) -> list[NamedEntity]:
        return self._fetch_named(self.categories_table)

    def fetch_rooms(self) -> list[NamedEntity]:
        return self._fetch_named(self.rooms_table)

    def create_item(self, record: ItemRecord) -> uuid.UUID:
        if not record.name.strip():
            raise StoreError("item name must not be empty")
        item_id = uuid.uuid4()
        self._pending.append(
            (
                str(item_id),
                record.name,
                record.brand,
                record.model_number,
                record.serial_number,
                record.purchase_price,
                record.purchase_date,
                record.warranty_expiration,
                record.condition.value,
                record.notes,
                record.category_id,
                record.room_id,
            )
        )
        return item_id

    def commit(self) -> None:
        rows = list(self._pending)
        try:
            self.cursor.execute("BEGIN")
            result = batch_insert(
                cursor=self.cursor,
                table=self.items_table,
                columns=ITEM_COLUMNS,
                rows=rows,
                page_size=self.page_size,
                metrics_callback=self._record_metrics,
            )
            self.cursor.execute("COMMIT")
        except Exception as e:
            try:
                self.cursor.execute("ROLLBACK")
            except Exception:
                logger.debug("rollback after failed commit also failed", exc_info=True)
            raise StoreError(str(e)) from e
        finally:
            self._pending.clear()
        logger.debug("committed %d items into %s", result.inserted_rows, self.items_table)

    def _record_metrics(self, metrics: BatchMetrics) -> None:
        self.last_metrics = metrics
        logger.debug(
            "batch insert into %s: %d rows in %.3fs",
            self.items_table, metrics.batch_size, metrics.elapsed_seconds,
        )

    def rollback(self) -> None:
        self._pending.clear()
