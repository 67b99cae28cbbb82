"""Column mapping: header scoring, manual overrides and field value parsers."""

from .column_mapper import ColumnMapper, derive_result
from .scoring import calculate_confidence, levenshtein_distance, normalize_header
from .value_parsers import parse_condition, parse_date, parse_price, parse_quantity

__all__ = [
    "ColumnMapper",
    "derive_result",
    "calculate_confidence",
    "levenshtein_distance",
    "normalize_header",
    "parse_condition",
    "parse_date",
    "parse_price",
    "parse_quantity",
]
