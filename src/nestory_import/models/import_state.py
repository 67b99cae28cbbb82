from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .import_summary import ImportSummary

"""Import workflow state.

State transitions (single linear workflow):
    idle → parsing → mapping → validating → importing(progress)
         → completed(summary) | failed(message)

FAILED is terminal until reset(); it is reachable from any state.
"""

__all__ = [
    "ImportPhase",
    "ImportState",
]


class ImportPhase(Enum):
    IDLE = "idle"
    PARSING = "parsing"
    MAPPING = "mapping"
    VALIDATING = "validating"
    IMPORTING = "importing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ImportState:
    """Current phase plus the payload that phase carries.

    progress is set only while IMPORTING, summary only when COMPLETED and
    message only when FAILED.
    """
    phase: ImportPhase
    progress: float | None = None
    summary: ImportSummary | None = None
    message: str | None = None

    @classmethod
    def idle(cls) -> ImportState:
        return cls(ImportPhase.IDLE)

    @classmethod
    def importing(cls, progress: float) -> ImportState:
        return cls(ImportPhase.IMPORTING, progress=progress)

    @classmethod
    def completed(cls, summary: ImportSummary) -> ImportState:
        return cls(ImportPhase.COMPLETED, summary=summary)

    @classmethod
    def failed(cls, message: str) -> ImportState:
        return cls(ImportPhase.FAILED, message=message)

    @property
    def is_terminal(self) -> bool:
        return self.phase in (ImportPhase.COMPLETED, ImportPhase.FAILED)
