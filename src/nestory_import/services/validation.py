from __future__ import annotations

import logging
from typing import Any

from ..mapping.value_parsers import parse_condition, parse_date, parse_price, parse_quantity
from ..models.column_mapping import MappingResult
from ..models.error_record import ImportErrorRecord
from ..models.parsed_table import ParsedTable
from ..models.target_field import TargetField
from ..models.validated_row import ItemCondition, ValidatedRow

"""Row validation against the current column mapping.

For each raw row, every mapped cell is coerced with the field value parsers:
- bad price / date text -> ImportErrorRecord, field left unset, row kept
- unparseable or non-positive quantity -> silently 1
- any condition text -> one of the five conditions (unknown -> GOOD)
- empty or missing name -> ImportErrorRecord and the row is dropped

Validation always recomputes from scratch; nothing is appended to earlier results.
"""

__all__ = [
    "NAME_ERROR_FIELD",
    "NAME_REQUIRED_MESSAGE",
    "validate_row",
    "validate_rows",
]

logger = logging.getLogger(__name__)

NAME_ERROR_FIELD = "Name"
NAME_REQUIRED_MESSAGE = "Item name is required"

_TEXT_FIELDS = {
    TargetField.NAME: "name",
    TargetField.BRAND: "brand",
    TargetField.MODEL_NUMBER: "model_number",
    TargetField.SERIAL_NUMBER: "serial_number",
    TargetField.NOTES: "notes",
    TargetField.CATEGORY: "category_name",
    TargetField.ROOM: "room_name",
}
_DATE_FIELDS = {
    TargetField.PURCHASE_DATE: "purchase_date",
    TargetField.WARRANTY_EXPIRATION: "warranty_expiration",
}


def validate_row(
    row: tuple[str, ...] | list[str],
    row_index: int,
    mapping: MappingResult,
    errors: list[ImportErrorRecord],
) -> ValidatedRow | None:
    """Coerce one raw row. Errors are appended to ``errors``.

    Returns None when the row has no usable name.
    """
    values: dict[str, Any] = {}
    condition = ItemCondition.GOOD
    quantity = 1

    for column in mapping.mappings:
        field = column.target_field
        if field is None or column.column_index >= len(row):
            continue
        value = row[column.column_index].strip()
        if not value:
            continue

        if field in _TEXT_FIELDS:
            values[_TEXT_FIELDS[field]] = value
        elif field is TargetField.PURCHASE_PRICE:
            price = parse_price(value)
            if price is None:
                errors.append(
                    ImportErrorRecord.for_row(
                        row_index, field.display_name, f"Invalid price format: {value}"
                    )
                )
            else:
                values["purchase_price"] = price
        elif field in _DATE_FIELDS:
            parsed = parse_date(value)
            if parsed is None:
                errors.append(
                    ImportErrorRecord.for_row(
                        row_index, field.display_name, f"Invalid date format: {value}"
                    )
                )
            else:
                values[_DATE_FIELDS[field]] = parsed
        elif field is TargetField.CONDITION:
            condition = parse_condition(value)
        elif field is TargetField.QUANTITY:
            qty = parse_quantity(value)
            if qty is not None and qty > 0:
                quantity = qty

    name = values.pop("name", None)
    if not name:
        errors.append(
            ImportErrorRecord.for_row(
                row_index, NAME_ERROR_FIELD, NAME_REQUIRED_MESSAGE
            )
        )
        return None

    return ValidatedRow(
        row_index=row_index,
        name=name,
        condition=condition,
        quantity=quantity,
        **values,
    )


def validate_rows(
    table: ParsedTable, mapping: MappingResult
) -> tuple[list[ValidatedRow], list[ImportErrorRecord]]:
    """Validate every data row of ``table``.

    Returns:
        (validated rows in original order, all row errors in row order)
    """
    validated: list[ValidatedRow] = []
    errors: list[ImportErrorRecord] = []
    for row_index, row in enumerate(table.rows):
        result = validate_row(row, row_index, mapping, errors)
        if result is not None:
            validated.append(result)
    logger.info("Validation complete: %d valid, %d errors", len(validated), len(errors))
    return validated, errors
