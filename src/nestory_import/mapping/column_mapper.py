from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.column_mapping import ColumnMapping, MappingResult
from ..models.target_field import TargetField
from .scoring import calculate_confidence, normalize_header

"""Column mapper: assign parsed headers to TargetFields.

Assignment is greedy and single-pass, left to right over the columns. A field
claimed by an earlier column is no longer offered to later columns, even if a
later column would match it better. There is no backtracking.
"""

__all__ = [
    "MIN_CONFIDENCE",
    "LOW_CONFIDENCE",
    "ColumnMapper",
    "derive_result",
]

logger = logging.getLogger(__name__)

# 0.5 を超えたものだけ自動割当候補
MIN_CONFIDENCE = 0.5
# これ未満の自動割当はレビュー推奨として警告
LOW_CONFIDENCE = 0.7


def derive_result(mappings: Sequence[ColumnMapping]) -> MappingResult:
    """Build a MappingResult from mappings, recomputing every derived field.

    Warnings:
    - required fields not mapped (one warning naming all of them)
    - more than half of the columns unmapped
    - mapped columns with confidence below LOW_CONFIDENCE
    """
    mappings = tuple(mappings)
    unmapped = tuple(m.column_index for m in mappings if m.target_field is None)
    mapped_fields = {m.target_field for m in mappings if m.target_field is not None}
    missing = tuple(f for f in TargetField if f.is_required and f not in mapped_fields)

    warnings: list[str] = []
    if missing:
        names = ", ".join(f.display_name for f in missing)
        warnings.append(f"Required fields not mapped: {names}")
    if len(unmapped) * 2 > len(mappings):
        warnings.append("More than half of columns could not be auto-mapped")
    low = [m for m in mappings if m.target_field is not None and m.confidence < LOW_CONFIDENCE]
    if low:
        headers = ", ".join(f'"{m.column_header}"' for m in low)
        warnings.append(f"Low confidence mappings (review recommended): {headers}")

    return MappingResult(
        mappings=mappings,
        unmapped_columns=unmapped,
        missing_required_fields=missing,
        warnings=tuple(warnings),
    )


class ColumnMapper:
    """Stateless header analyzer; safe to share between import sessions."""

    def analyze_headers(self, headers: Sequence[str]) -> MappingResult:
        """Suggest a mapping for every header.

        Args:
            headers: Column headers as returned by the parser

        Returns:
            MappingResult with one ColumnMapping per header, in column order
        """
        logger.info("Analyzing %d headers", len(headers))
        used: set[TargetField] = set()
        mappings: list[ColumnMapping] = []

        for index, header in enumerate(headers):
            normalized = normalize_header(header)
            best_field: TargetField | None = None
            best_confidence = 0.0
            for field in TargetField:
                if field in used:
                    continue
                confidence = calculate_confidence(normalized, field)
                # 同点は列挙順で先のフィールドを維持 (決定的)
                if confidence > MIN_CONFIDENCE and confidence > best_confidence:
                    best_field = field
                    best_confidence = confidence

            if best_field is not None:
                used.add(best_field)
            mappings.append(
                ColumnMapping(
                    column_index=index,
                    column_header=header,
                    target_field=best_field,
                    confidence=best_confidence if best_field is not None else 0.0,
                )
            )

        result = derive_result(mappings)
        logger.info(
            "Mapped %d/%d fields, %d unmapped columns",
            result.mapped_field_count,
            len(TargetField),
            len(result.unmapped_columns),
        )
        return result

    def update_mapping(
        self,
        result: MappingResult,
        column_index: int,
        new_field: TargetField | None,
    ) -> MappingResult:
        """Return a new MappingResult with one column manually (re)assigned.

        If ``new_field`` is already held by another column, that column is cleared
        first so a field is never mapped twice. Manual assignment sets confidence
        to 1.0; clearing sets it to 0.
        """
        if not any(m.column_index == column_index for m in result.mappings):
            logger.warning("update_mapping: no column with index %d", column_index)
            return result

        updated: list[ColumnMapping] = []
        for m in result.mappings:
            if m.column_index == column_index:
                updated.append(
                    ColumnMapping(
                        column_index=m.column_index,
                        column_header=m.column_header,
                        target_field=new_field,
                        confidence=1.0 if new_field is not None else 0.0,
                    )
                )
            elif new_field is not None and m.target_field is new_field:
                logger.debug(
                    "field %s moved from column %d to column %d",
                    new_field.value, m.column_index, column_index,
                )
                updated.append(
                    ColumnMapping(
                        column_index=m.column_index,
                        column_header=m.column_header,
                        target_field=None,
                        confidence=0.0,
                    )
                )
            else:
                updated.append(m)
        return derive_result(updated)
