from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from ..db.store import InventoryStore, ItemRecord, NamedEntity
from ..mapping.column_mapper import ColumnMapper
from ..models.column_mapping import MappingResult
from ..models.error_record import ImportErrorRecord
from ..models.import_state import ImportPhase, ImportState
from ..models.import_summary import ImportSummary
from ..models.parsed_table import Delimiter, ParsedTable
from ..models.target_field import TargetField
from ..models.validated_row import ValidatedRow
from ..tabular.parser import ParseError, parse, parse_path
from .progress import ProgressTracker
from .validation import validate_rows

"""Import workflow orchestration.

One ImportOrchestrator drives one file at a time through

    idle -> parsing -> mapping -> validating -> importing -> completed | failed

Transitions only happen on explicit calls (parse_file, validate_rows,
execute_import). FAILED is terminal until reset().

Commit pass semantics:
- categories / rooms are fetched once and matched case-insensitively by name;
  unknown names leave the relationship unset
- a row with quantity N creates N items
- a failing create_item is recorded as an ImportErrorRecord and the batch continues
- the store's commit() runs exactly once at the end; if it fails the whole
  workflow fails and no summary is produced
- any pass that ends without a successful commit rolls the store back
"""

__all__ = [
    "DEFAULT_YIELD_EVERY",
    "WorkflowStateError",
    "ImportOrchestrator",
]

logger = logging.getLogger(__name__)

DEFAULT_YIELD_EVERY = 10

StateListener = Callable[[ImportState], None]


class WorkflowStateError(Exception):
    """Raised when an operation is not allowed in the current workflow state."""


class _ImportCancelled(Exception):
    pass


class ImportOrchestrator:
    """Owns the parse -> map -> validate -> commit workflow for one import session.

    Single writer: call from one thread. cancel() is the only method meant to be
    called from another thread.
    """

    def __init__(
        self,
        mapper: ColumnMapper | None = None,
        *,
        yield_every: int = DEFAULT_YIELD_EVERY,
    ) -> None:
        self.mapper = mapper or ColumnMapper()
        self.yield_every = max(1, yield_every)
        self._state = ImportState.idle()
        self.parsed_table: ParsedTable | None = None
        self.mapping_result: MappingResult | None = None
        self.validated_rows: list[ValidatedRow] = []
        self.validation_errors: list[ImportErrorRecord] = []
        self._listeners: list[StateListener] = []
        self._cancel = threading.Event()

    # ------------------------------------------------------------------ state
    @property
    def state(self) -> ImportState:
        return self._state

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback receiving every new ImportState."""
        self._listeners.append(listener)

    def _set_state(self, state: ImportState) -> None:
        self._state = state
        for listener in self._listeners:
            listener(state)

    def _fail(self, message: str) -> None:
        logger.error(message)
        self._set_state(ImportState.failed(message))

    def _ensure_not_failed(self, operation: str) -> None:
        if self._state.phase is ImportPhase.FAILED:
            raise WorkflowStateError(
                f"cannot {operation}: workflow failed ({self._state.message}); call reset() first"
            )

    def set_error(self, message: str) -> None:
        """Force the FAILED state (e.g. the file picker could not open the file)."""
        self._fail(message)

    def reset(self) -> None:
        """Return to IDLE and discard all derived data."""
        self.parsed_table = None
        self.mapping_result = None
        self.validated_rows = []
        self.validation_errors = []
        self._cancel.clear()
        self._set_state(ImportState.idle())

    def cancel(self) -> None:
        """Request cancellation of a running execute_import (checked at yield points)."""
        self._cancel.set()

    # ------------------------------------------------------------------ parse / map
    def parse_file(
        self,
        source: bytes | str | Path,
        *,
        delimiter: Delimiter | None = None,
        has_headers: bool = True,
    ) -> None:
        """Parse ``source`` and auto-map its headers.

        ``source`` is raw bytes, decoded text, or a Path to read. On success the
        workflow lands in MAPPING with parsed_table and mapping_result populated;
        any parse error moves it to FAILED with the error message.
        """
        self._ensure_not_failed("parse file")
        self.parsed_table = None
        self.mapping_result = None
        self.validated_rows = []
        self.validation_errors = []
        self._set_state(ImportState(ImportPhase.PARSING))

        try:
            if isinstance(source, Path):
                logger.info("Starting import from: %s", source.name)
                table = parse_path(source, delimiter=delimiter, has_headers=has_headers)
            else:
                table = parse(source, delimiter=delimiter, has_headers=has_headers)
        except ParseError as e:
            self._fail(str(e))
            return

        self.parsed_table = table
        logger.info("Parsed %d rows, %d columns", table.row_count, table.column_count)
        self.mapping_result = self.mapper.analyze_headers(table.headers)
        self._set_state(ImportState(ImportPhase.MAPPING))
        logger.info(
            "Column mapping complete, %d fields mapped", self.mapping_result.mapped_field_count
        )

    def update_column_mapping(self, column_index: int, field: TargetField | None) -> None:
        """Manually (re)assign one column; the MappingResult is replaced."""
        if self.mapping_result is None:
            logger.warning("update_column_mapping called without a mapping")
            return
        self.mapping_result = self.mapper.update_mapping(
            self.mapping_result, column_index, field
        )

    # ------------------------------------------------------------------ validate
    def validate_rows(self) -> None:
        """Validate every parsed row against the current mapping (from scratch)."""
        self._ensure_not_failed("validate rows")
        if self.parsed_table is None or self.mapping_result is None:
            self._fail("No data to validate")
            return

        self._set_state(ImportState(ImportPhase.VALIDATING))
        logger.info("Validating %d rows", len(self.parsed_table.rows))
        self.validated_rows, self.validation_errors = validate_rows(
            self.parsed_table, self.mapping_result
        )

    # ------------------------------------------------------------------ import
    def execute_import(self, store: InventoryStore) -> ImportSummary | None:
        """Create items for every validated row and commit once.

        Returns:
            The ImportSummary (also published as the COMPLETED state), or None when
            the workflow failed or was cancelled.
        """
        self._ensure_not_failed("execute import")
        if not self.validated_rows:
            self._fail("No valid rows to import")
            return None

        self._cancel.clear()
        start = time.perf_counter()
        started_at = datetime.now(UTC)
        total = len(self.validated_rows)
        imported = 0
        imported_rows = 0
        row_errors: list[ImportErrorRecord] = []
        logger.info("Starting import of %d rows", total)

        try:
            categories = _index_by_name(store.fetch_categories())
            rooms = _index_by_name(store.fetch_rooms())
        except Exception as e:
            self._fail(f"Failed to load categories and rooms: {e}")
            return None

        try:
            self._set_state(ImportState.importing(0.0))
            with ProgressTracker(total) as progress:
                for index, row in enumerate(self.validated_rows):
                    created, error = _create_items(row, categories, rooms, store)
                    imported += created
                    if error is None:
                        imported_rows += 1
                    else:
                        row_errors.append(error)

                    fraction = progress.advance()
                    progress.set_postfix(imported=imported, errors=len(row_errors))
                    self._set_state(ImportState.importing(fraction))

                    if index % self.yield_every == 0:
                        self._checkpoint()
        except _ImportCancelled:
            _discard_pending(store)
            logger.warning("Import cancelled after %d items; nothing committed", imported)
            self._set_state(ImportState(ImportPhase.VALIDATING))
            return None
        except Exception as e:
            _discard_pending(store)
            self._fail(f"Import failed: {e}")
            return None

        try:
            store.commit()
        except Exception as e:
            _discard_pending(store)
            self._fail(f"Failed to save: {e}")
            return None

        duration = time.perf_counter() - start
        errors = tuple(self.validation_errors) + tuple(row_errors)
        table_rows = self.parsed_table.row_count if self.parsed_table is not None else total
        summary = ImportSummary(
            total_rows=table_rows,
            imported_count=imported,
            skipped_count=max(table_rows - total, 0),
            error_count=len(errors),
            errors=errors,
            duration_seconds=duration,
            imported_rows=imported_rows,
        )
        logger.info(
            "Import complete: %d items from %d rows in %.1fs (started %s)",
            imported, total, duration, started_at.isoformat().replace("+00:00", "Z"),
        )
        self._set_state(ImportState.completed(summary))
        return summary

    def _checkpoint(self) -> None:
        """Yield point: honour cancellation and let other threads run."""
        if self._cancel.is_set():
            raise _ImportCancelled()
        time.sleep(0)


def _discard_pending(store: InventoryStore) -> None:
    """Roll back staged items; a failing rollback is logged, not raised."""
    try:
        store.rollback()
    except Exception as e:
        logger.warning("rollback failed: %s", e)


def _index_by_name(entities: list[NamedEntity]) -> dict[str, NamedEntity]:
    # 同名が複数ある場合は最初のものを採用
    index: dict[str, NamedEntity] = {}
    for entity in entities:
        index.setdefault(entity.name.lower(), entity)
    return index


def _create_items(
    row: ValidatedRow,
    categories: dict[str, NamedEntity],
    rooms: dict[str, NamedEntity],
    store: InventoryStore,
) -> tuple[int, ImportErrorRecord | None]:
    """Create ``row.quantity`` copies; stop at the first failure for this row.

    Returns (number of items created, error or None).
    """
    category = categories.get(row.category_name.lower()) if row.category_name else None
    room = rooms.get(row.room_name.lower()) if row.room_name else None
    record = ItemRecord(
        name=row.name,
        brand=row.brand,
        model_number=row.model_number,
        serial_number=row.serial_number,
        purchase_price=row.purchase_price,
        purchase_date=row.purchase_date,
        warranty_expiration=row.warranty_expiration,
        condition=row.condition,
        notes=row.notes,
        category_id=category.id if category is not None else None,
        room_id=room.id if room is not None else None,
    )

    created = 0
    for _ in range(row.quantity):
        try:
            store.create_item(record)
        except Exception as e:
            logger.warning("row %d: item creation failed: %s", row.row_number, e)
            return created, ImportErrorRecord(row_number=row.row_number, field="item", message=str(e))
        created += 1
    return created, None
