from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from nestory_import.mapping.value_parsers import (
    parse_condition,
    parse_date,
    parse_price,
    parse_quantity,
)
from nestory_import.models.validated_row import ItemCondition


@pytest.mark.parametrize(
    "text,expected",
    [
        ("29.99", Decimal("29.99")),
        ("$1,299.00", Decimal("1299.00")),
        ("€ 5", Decimal("5")),
        ("£12.5", Decimal("12.5")),
        ("-3", Decimal("-3")),
    ],
)
def test_parse_price_valid(text: str, expected: Decimal):
    assert parse_price(text) == expected


@pytest.mark.parametrize("text", ["abc", "", "  ", "1.2.3", "NaN", "Infinity"])
def test_parse_price_invalid(text: str):
    assert parse_price(text) is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2023-01-15", date(2023, 1, 15)),
        ("03/20/2022", date(2022, 3, 20)),
        ("01/02/2023", date(2023, 1, 2)),  # 米国式が優先
        ("20/03/2022", date(2022, 3, 20)),
        ("2022/12/31", date(2022, 12, 31)),
        ("Jan 5, 2023", date(2023, 1, 5)),
        ("March 5, 2023", date(2023, 3, 5)),
        ("5 March 2023", date(2023, 3, 5)),
    ],
)
def test_parse_date_formats(text: str, expected: date):
    assert parse_date(text) == expected


@pytest.mark.parametrize("text", ["sometime", "", "13/13/2023", "2023-02-30"])
def test_parse_date_invalid(text: str):
    assert parse_date(text) is None


@pytest.mark.parametrize(
    "text,expected",
    [("3", 3), ("1,000", 1000), (" 7 ", 7), ("-1", -1), ("2.5", None), ("abc", None), ("", None)],
)
def test_parse_quantity(text: str, expected):
    assert parse_quantity(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("new", ItemCondition.NEW),
        ("like-new", ItemCondition.LIKE_NEW),
        ("Like New", ItemCondition.LIKE_NEW),
        ("Very Good", ItemCondition.LIKE_NEW),
        ("Brand New", ItemCondition.NEW),
        ("excellent", ItemCondition.NEW),
        ("worn out", ItemCondition.POOR),
        ("not working", ItemCondition.POOR),
        ("worn", ItemCondition.FAIR),
        ("okay", ItemCondition.FAIR),
        ("nice", ItemCondition.GOOD),
        ("GOOD", ItemCondition.GOOD),
        ("purple", ItemCondition.GOOD),
        ("", ItemCondition.GOOD),
    ],
)
def test_parse_condition(text: str, expected: ItemCondition):
    assert parse_condition(text) is expected
