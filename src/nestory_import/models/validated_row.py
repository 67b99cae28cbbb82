from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

"""ValidatedRow model and ItemCondition vocabulary.

A ValidatedRow is one raw row after type coercion against the current mapping.
Only rows with a non-empty name become ValidatedRows; condition defaults to GOOD
and quantity to 1.
"""

__all__ = [
    "ItemCondition",
    "ValidatedRow",
]


class ItemCondition(Enum):
    """Fixed condition scale for inventory items."""
    NEW = "new"
    LIKE_NEW = "like-new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @property
    def display_name(self) -> str:
        return self.value.replace("-", " ").title()


@dataclass(frozen=True)
class ValidatedRow:
    """Typed record ready for entity creation.

    row_index is the zero-based index into ParsedTable.rows; ``quantity`` is a
    "create N copies" directive, not a stored attribute.
    """
    row_index: int
    name: str
    brand: str | None = None
    model_number: str | None = None
    serial_number: str | None = None
    purchase_price: Decimal | None = None
    purchase_date: date | None = None
    warranty_expiration: date | None = None
    condition: ItemCondition = ItemCondition.GOOD
    notes: str | None = None
    category_name: str | None = None
    room_name: str | None = None
    quantity: int = 1

    @property
    def row_number(self) -> int:
        """Display row number (1-based, counting the header line)."""
        return self.row_index + 2
