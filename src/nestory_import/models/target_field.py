from __future__ import annotations

from enum import Enum

"""TargetField catalog: the closed set of item attributes a column can map to.

Each member carries a display label, a required flag (only NAME is required) and
the header spellings used for auto-detection. Iteration order of the enum is the
scoring order used by the column mapper, so ties resolve deterministically.
"""

__all__ = [
    "TargetField",
]


class TargetField(Enum):
    """Inventory item attribute that an input column may be mapped to."""
    NAME = "name"
    BRAND = "brand"
    MODEL_NUMBER = "model_number"
    SERIAL_NUMBER = "serial_number"
    PURCHASE_PRICE = "purchase_price"
    PURCHASE_DATE = "purchase_date"
    WARRANTY_EXPIRATION = "warranty_expiration"
    CONDITION = "condition"
    NOTES = "notes"
    CATEGORY = "category"
    ROOM = "room"
    QUANTITY = "quantity"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_required(self) -> bool:
        return self is TargetField.NAME

    @property
    def header_variations(self) -> tuple[str, ...]:
        """Known normalized header spellings (lowercase, single spaces)."""
        return _HEADER_VARIATIONS[self]

    @classmethod
    def from_value(cls, value: str) -> TargetField:
        """Resolve a field from its value or display name, case-insensitively."""
        key = value.strip().lower()
        for field in cls:
            if key in (field.value, field.display_name.lower()):
                return field
        raise ValueError(f"unknown target field: {value!r}")


_DISPLAY_NAMES = {
    TargetField.NAME: "Item Name",
    TargetField.BRAND: "Brand",
    TargetField.MODEL_NUMBER: "Model Number",
    TargetField.SERIAL_NUMBER: "Serial Number",
    TargetField.PURCHASE_PRICE: "Purchase Price",
    TargetField.PURCHASE_DATE: "Purchase Date",
    TargetField.WARRANTY_EXPIRATION: "Warranty Expiration",
    TargetField.CONDITION: "Condition",
    TargetField.NOTES: "Notes",
    TargetField.CATEGORY: "Category",
    TargetField.ROOM: "Room",
    TargetField.QUANTITY: "Quantity",
}

_HEADER_VARIATIONS: dict[TargetField, tuple[str, ...]] = {
    TargetField.NAME: (
        "name", "item", "item name", "product", "product name", "title",
        "description", "item description",
    ),
    TargetField.BRAND: ("brand", "manufacturer", "make", "company", "vendor"),
    TargetField.MODEL_NUMBER: (
        "model", "model number", "model no", "model #", "model no.", "sku",
        "part number", "part no",
    ),
    TargetField.SERIAL_NUMBER: (
        "serial", "serial number", "serial no", "serial #", "serial no.", "sn", "s/n",
    ),
    TargetField.PURCHASE_PRICE: (
        "price", "purchase price", "cost", "amount", "value", "paid",
        "purchase amount", "item price", "retail price", "original price",
    ),
    TargetField.PURCHASE_DATE: (
        "purchase date", "date purchased", "bought", "date bought", "acquired",
        "date acquired", "purchase", "buy date",
    ),
    TargetField.WARRANTY_EXPIRATION: (
        "warranty", "warranty expiration", "warranty expires", "warranty end",
        "warranty date", "guarantee",
    ),
    TargetField.CONDITION: ("condition", "status", "state", "quality"),
    TargetField.NOTES: (
        "notes", "note", "comments", "comment", "remarks", "description", "details",
        "memo",
    ),
    TargetField.CATEGORY: ("category", "type", "group", "classification", "class", "kind"),
    TargetField.ROOM: (
        "room", "location", "place", "area", "zone", "where", "stored in", "storage",
    ),
    TargetField.QUANTITY: ("quantity", "qty", "count", "amount", "number", "units", "pieces"),
}
