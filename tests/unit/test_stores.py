from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, call, patch

import pytest

from nestory_import.db.postgres_store import ITEM_COLUMNS, PostgresInventoryStore
from nestory_import.db.store import (
    InMemoryInventoryStore,
    InventoryStore,
    ItemRecord,
    NamedEntity,
    StoreError,
)
from nestory_import.models.validated_row import ItemCondition


def _record(name: str = "Lamp") -> ItemRecord:
    return ItemRecord(
        name=name,
        brand="IKEA",
        purchase_price=Decimal("29.99"),
        purchase_date=date(2023, 1, 15),
        condition=ItemCondition.LIKE_NEW,
        category_id=1,
    )


class TestInMemoryInventoryStore:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryInventoryStore(), InventoryStore)
        assert isinstance(PostgresInventoryStore(MagicMock()), InventoryStore)

    def test_with_names_assigns_ids(self):
        store = InMemoryInventoryStore.with_names(categories=["A", "B"], rooms=["Den"])
        assert store.fetch_categories() == [NamedEntity(1, "A"), NamedEntity(2, "B")]
        assert store.fetch_rooms() == [NamedEntity(1, "Den")]

    def test_items_visible_only_after_commit(self):
        store = InMemoryInventoryStore()
        first = store.create_item(_record())
        second = store.create_item(_record())
        assert first != second
        assert store.items == {}
        assert len(store.pending) == 2
        store.commit()
        assert set(store.items) == {first, second}
        assert store.pending == {}
        assert store.commit_count == 1

    def test_rollback_discards_pending(self):
        store = InMemoryInventoryStore()
        store.create_item(_record())
        store.rollback()
        store.commit()
        assert store.items == {}

    def test_blank_name_rejected(self):
        with pytest.raises(StoreError):
            InMemoryInventoryStore().create_item(_record("  "))


class TestPostgresInventoryStore:
    def test_fetch_named_entities(self):
        cursor = MagicMock()
        cursor.fetchall.return_value = [(1, "Electronics"), (2, "Furniture")]
        store = PostgresInventoryStore(cursor, categories_table="app_categories")

        result = store.fetch_categories()

        cursor.execute.assert_called_once_with(
            "SELECT id, name FROM app_categories ORDER BY name"
        )
        assert result == [NamedEntity(1, "Electronics"), NamedEntity(2, "Furniture")]

    def test_fetch_failure_wrapped(self):
        cursor = MagicMock()
        cursor.execute.side_effect = RuntimeError("relation does not exist")
        with pytest.raises(StoreError, match="failed to read rooms"):
            PostgresInventoryStore(cursor).fetch_rooms()

    def test_commit_inserts_staged_rows_in_one_transaction(self):
        cursor = MagicMock()
        store = PostgresInventoryStore(cursor, page_size=500)
        item_id = store.create_item(_record())
        assert store.pending_count == 1

        with patch("nestory_import.db.batch_insert.execute_values") as ev:
            store.commit()

        assert cursor.execute.call_args_list == [call("BEGIN"), call("COMMIT")]
        ev.assert_called_once()
        args, kwargs = ev.call_args
        sql = args[1]
        rows = args[2]
        assert sql.startswith("INSERT INTO items (")
        assert '"purchase_price"' in sql
        assert kwargs["page_size"] == 500
        assert len(rows) == 1
        row = dict(zip(ITEM_COLUMNS, rows[0]))
        assert row["id"] == str(item_id)
        assert row["condition"] == "like-new"
        assert row["purchase_price"] == Decimal("29.99")
        assert row["room_id"] is None
        assert store.pending_count == 0
        assert store.last_metrics is not None
        assert store.last_metrics.batch_size == 1

    def test_commit_failure_rolls_back_and_raises(self):
        cursor = MagicMock()
        store = PostgresInventoryStore(cursor)
        store.create_item(_record())

        with patch(
            "nestory_import.db.batch_insert.execute_values",
            side_effect=RuntimeError("unique violation"),
        ):
            with pytest.raises(StoreError, match="unique violation"):
                store.commit()

        assert cursor.execute.call_args_list == [call("BEGIN"), call("ROLLBACK")]
        assert store.pending_count == 0

    def test_rollback_clears_staged_rows(self):
        store = PostgresInventoryStore(MagicMock())
        store.create_item(_record())
        store.rollback()
        assert store.pending_count == 0

    def test_blank_name_rejected(self):
        with pytest.raises(StoreError):
            PostgresInventoryStore(MagicMock()).create_item(_record(""))
