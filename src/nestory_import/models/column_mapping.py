from __future__ import annotations

from dataclasses import dataclass

from .target_field import TargetField

"""ColumnMapping / MappingResult value objects.

MappingResult is replaced, never patched: every edit produces a new instance with
the derived fields (unmapped columns, missing required fields, warnings) recomputed.
"""

__all__ = [
    "ColumnMapping",
    "MappingResult",
]


@dataclass(frozen=True)
class ColumnMapping:
    """Assignment of one input column to at most one TargetField.

    confidence: 1.0 for exact or manual matches, 0 when unmapped, in between for
    auto-detected substring / fuzzy matches.
    """
    column_index: int
    column_header: str
    target_field: TargetField | None = None
    confidence: float = 0.0

    @property
    def is_mapped(self) -> bool:
        return self.target_field is not None

    @property
    def is_auto_mapped(self) -> bool:
        return self.confidence > 0


@dataclass(frozen=True)
class MappingResult:
    """Full mapping for a table plus derived validity information."""
    mappings: tuple[ColumnMapping, ...]
    unmapped_columns: tuple[int, ...]
    missing_required_fields: tuple[TargetField, ...]
    warnings: tuple[str, ...]

    @property
    def is_valid(self) -> bool:
        return not self.missing_required_fields

    @property
    def mapped_field_count(self) -> int:
        return sum(1 for m in self.mappings if m.target_field is not None)

    def field_for_column(self, column_index: int) -> TargetField | None:
        for m in self.mappings:
            if m.column_index == column_index:
                return m.target_field
        return None

    def column_for_field(self, field: TargetField) -> int | None:
        for m in self.mappings:
            if m.target_field is field:
                return m.column_index
        return None
