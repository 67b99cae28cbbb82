"""Import workflow services: orchestration, validation, progress and summary output."""

from .orchestrator import DEFAULT_YIELD_EVERY, ImportOrchestrator, WorkflowStateError
from .progress import ProgressTracker, is_tty_enabled
from .summary import format_seconds, render_summary_line
from .validation import NAME_REQUIRED_MESSAGE, validate_row, validate_rows

__all__ = [
    "DEFAULT_YIELD_EVERY",
    "ImportOrchestrator",
    "WorkflowStateError",
    "ProgressTracker",
    "is_tty_enabled",
    "format_seconds",
    "render_summary_line",
    "NAME_REQUIRED_MESSAGE",
    "validate_row",
    "validate_rows",
]
