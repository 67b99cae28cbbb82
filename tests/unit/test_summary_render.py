from __future__ import annotations

import re

import pytest

from nestory_import.models.import_summary import ImportSummary
from nestory_import.services.summary import format_seconds, render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+rows=([0-9]+)\s+imported=([0-9]+)\s+skipped=([0-9]+)\s+"
    r"errors=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_render_summary_line_all_success():
    summary = ImportSummary(
        total_rows=3, imported_count=5, skipped_count=0, error_count=0, duration_seconds=2.0
    )
    line = render_summary_line(summary)
    assert line == "SUMMARY rows=3 imported=5 skipped=0 errors=0 elapsed_sec=2"
    assert SUMMARY_PATTERN.match(line)


def test_render_summary_line_with_errors():
    summary = ImportSummary(
        total_rows=10, imported_count=8, skipped_count=1, error_count=2, duration_seconds=0.8412
    )
    m = SUMMARY_PATTERN.match(render_summary_line(summary))
    assert m is not None
    assert m.groups() == ("10", "8", "1", "2", "0.841")


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "0"), (3.0, "3"), (1.5, "1.5"), (0.1234, "0.123"), (0.000123, "0.000123"), (0.0000001, "0")],
)
def test_format_seconds(seconds: float, expected: str):
    assert format_seconds(seconds) == expected
