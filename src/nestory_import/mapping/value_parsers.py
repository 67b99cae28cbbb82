from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from ..models.validated_row import ItemCondition

"""Field value parsers (pure functions, no I/O).

parse_price / parse_date / parse_quantity return None when the text cannot be
interpreted; parse_condition never fails and falls back to GOOD.
"""

__all__ = [
    "DATE_FORMATS",
    "parse_price",
    "parse_date",
    "parse_quantity",
    "parse_condition",
]

_PRICE_NOISE = re.compile(r"[\s,$€£¥₹]")
_INTEGER = re.compile(r"[+-]?\d+")

# 順序が優先度: ISO -> US -> EU -> 月名表記
DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%m-%d-%Y",
    "%d-%m-%Y",
    "%Y/%m/%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)

# Checked in order, first bucket with a matching keyword wins ("like new" before "new").
_CONDITION_BUCKETS: tuple[tuple[ItemCondition, tuple[str, ...]], ...] = (
    (ItemCondition.LIKE_NEW, ("like new", "like-new", "likenew", "very good", "great", "open box")),
    (ItemCondition.NEW, ("brand new", "new", "mint", "excellent", "sealed", "unused")),
    (ItemCondition.POOR, ("poor", "bad", "damaged", "broken", "worn out", "not working")),
    (ItemCondition.FAIR, ("fair", "ok", "okay", "average", "worn")),
    (ItemCondition.GOOD, ("good", "nice", "fine")),
)


def parse_price(text: str) -> Decimal | None:
    """Parse "$1,234.56" style text into a Decimal.

    Currency symbols, thousands separators and spaces are stripped first.
    Non-finite values (NaN, Infinity) are rejected.
    """
    cleaned = _PRICE_NOISE.sub("", text)
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_date(text: str) -> date | None:
    """Try DATE_FORMATS in order, then ISO-8601 date-only."""
    trimmed = text.strip()
    if not trimmed:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(trimmed, fmt).date()
        except ValueError:
            continue
    try:
        return date.fromisoformat(trimmed)
    except ValueError:
        return None


def parse_quantity(text: str) -> int | None:
    """Parse an integer, ignoring thousands separators. Callers require > 0."""
    cleaned = text.replace(",", "").strip()
    if not _INTEGER.fullmatch(cleaned):
        return None
    return int(cleaned)


def parse_condition(text: str) -> ItemCondition:
    """Normalize free text onto the five-value condition scale (default GOOD)."""
    normalized = " ".join(text.lower().split())
    if not normalized:
        return ItemCondition.GOOD
    for condition in ItemCondition:
        if normalized == condition.value:
            return condition
    words = set(re.findall(r"[a-z]+", normalized))
    for condition, keywords in _CONDITION_BUCKETS:
        for keyword in keywords:
            if " " in keyword or "-" in keyword:
                if keyword in normalized:
                    return condition
            elif keyword in words:
                return condition
    return ItemCondition.GOOD
