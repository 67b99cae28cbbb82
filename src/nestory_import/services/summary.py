from __future__ import annotations

from ..models.import_summary import ImportSummary

"""Summary line rendering for the end of an import run.

Format::

    SUMMARY rows=<total> imported=<n> skipped=<n> errors=<n> elapsed_sec=<s>
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(seconds: float) -> str:
    """Render seconds without scientific notation; whole numbers drop the decimals."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(summary: ImportSummary) -> str:
    """Render a SUMMARY line from an ImportSummary.

    Examples:
        >>> s = ImportSummary(total_rows=10, imported_count=12, skipped_count=1,
        ...                   error_count=2, duration_seconds=1.5)
        >>> render_summary_line(s)
        'SUMMARY rows=10 imported=12 skipped=1 errors=2 elapsed_sec=1.5'
    """
    return (
        f"SUMMARY rows={summary.total_rows} "
        f"imported={summary.imported_count} "
        f"skipped={summary.skipped_count} "
        f"errors={summary.error_count} "
        f"elapsed_sec={format_seconds(summary.duration_seconds)}"
    )
