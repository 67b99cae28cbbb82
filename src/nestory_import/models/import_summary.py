from __future__ import annotations

from dataclasses import dataclass, field

from .error_record import ImportErrorRecord

"""ImportSummary: terminal result of one commit pass."""

__all__ = [
    "ImportSummary",
]


@dataclass(frozen=True)
class ImportSummary:
    """Counts and errors of a completed import.

    total_rows is the parsed data row count; imported_count counts created
    entities (a row with quantity 3 contributes 3); skipped_count counts rows
    dropped during validation. imported_rows counts rows whose items were all
    created; when omitted, imported_count stands in for it.
    """
    total_rows: int
    imported_count: int
    skipped_count: int
    error_count: int
    errors: tuple[ImportErrorRecord, ...] = field(default_factory=tuple)
    duration_seconds: float = 0.0
    imported_rows: int | None = None

    @property
    def success_rate(self) -> float:
        """Share of parsed rows that were imported, in [0, 1]."""
        if self.total_rows <= 0:
            return 0.0
        rows = self.imported_rows if self.imported_rows is not None else self.imported_count
        return min(max(rows / self.total_rows, 0.0), 1.0)
