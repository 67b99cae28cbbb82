from __future__ import annotations

from dataclasses import dataclass

"""ImportErrorRecord model.

Row-scoped validation / creation problem. These are accumulated values, never
raised: an import completes with partial success and reports the list.
"""

__all__ = [
    "ImportErrorRecord",
]


@dataclass(frozen=True)
class ImportErrorRecord:
    """One row-level import error.

    Attributes:
        row_number: 1-based display row (zero-based data index + 2, counting the header)
        field: Display name of the field concerned, or ``"item"`` for creation failures
        message: Human readable description
    """
    row_number: int
    field: str
    message: str

    @staticmethod
    def for_row(row_index: int, field: str, message: str) -> ImportErrorRecord:
        """Create a record from a zero-based data row index."""
        return ImportErrorRecord(row_number=row_index + 2, field=field, message=message)
