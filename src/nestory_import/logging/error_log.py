from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ImportErrorRecord

"""JSON Lines error log for row-level import errors.

One file per run, ``<dir>/errors-YYYYMMDD-HHMMSS.log`` (UTC), created lazily on
the first flush that has records. Each line has exactly the keys
timestamp, file, row, field, message.
"""

__all__ = [
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer of ImportErrorRecords; flush() appends them as JSON Lines.

    Serial use only (no locking).
    """

    def __init__(self, source: str, directory: Path | None = None) -> None:
        self.source = source
        self.directory = directory if directory is not None else LOGS_DIR
        self._lines: list[str] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.directory / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ImportErrorRecord) -> None:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        self._lines.append(
            json.dumps(
                {
                    "timestamp": ts,
                    "file": self.source,
                    "row": record.row_number,
                    "field": record.field,
                    "message": record.message,
                },
                ensure_ascii=False,
            )
        )

    def extend(self, records: list[ImportErrorRecord] | tuple[ImportErrorRecord, ...]) -> None:
        for r in records:
            self.append(r)

    def __len__(self) -> int:
        return len(self._lines)

    def flush(self) -> Path | None:
        """Write buffered lines; returns the log path, or None when nothing was buffered."""
        if not self._lines:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for line in self._lines:
                f.write(line + "\n")
        self._lines.clear()
        return fp
