from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display service with tqdm (TTY only).

A single tqdm bar per import run, advanced once per validated row. In non-TTY
environments (CI, pipes) the bar is disabled to avoid ANSI control sequence spam;
the orchestrator's fractional progress is still published to state listeners.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Row progress bar for the commit pass."""

    def __init__(self, total_rows: int, *, description: str = "Importing items") -> None:
        """Initialize progress tracker.

        Args:
            total_rows: Number of validated rows that will be processed
            description: Description for the progress bar
        """
        self.total_rows = total_rows
        self.description = description
        self.completed = 0

        # Create tqdm instance only if TTY is enabled
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,  # Standard width for consistency
                ascii=True,  # ASCII chars for better compatibility
            )
        else:
            self.pbar = None

    @property
    def fraction(self) -> float:
        """Completed share in [0, 1]."""
        if self.total_rows <= 0:
            return 1.0
        return min(self.completed / self.total_rows, 1.0)

    def advance(self, rows: int = 1) -> float:
        """Mark ``rows`` more rows as done and return the new fraction."""
        self.completed += rows
        if self.enabled and self.pbar is not None:
            self.pbar.update(rows)
        return self.fraction

    def set_postfix(self, **kwargs: Any) -> None:
        """Set postfix information (stats) on the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
