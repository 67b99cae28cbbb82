from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pandas as pd

"""ParsedTable model and Delimiter enum.

ParsedTable is the immutable output of the tabular parser: headers, data rows and
the detected delimiter / encoding. Rows never carry more cells than there are
headers (longer rows are truncated by the parser, shorter rows are kept as-is).
"""

__all__ = [
    "Delimiter",
    "ParsedTable",
]


class Delimiter(Enum):
    """Supported field delimiters.

    Declaration order is also the tie-break order for auto-detection:
    comma > semicolon > tab > pipe.
    """
    COMMA = ","
    SEMICOLON = ";"
    TAB = "\t"
    PIPE = "|"

    @property
    def display_name(self) -> str:
        return _DELIMITER_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> Delimiter:
        """Look up a delimiter by its lowercase member name (``"comma"``, ``"tab"``...)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown delimiter: {name!r}") from None


_DELIMITER_NAMES = {
    Delimiter.COMMA: "Comma (,)",
    Delimiter.SEMICOLON: "Semicolon (;)",
    Delimiter.TAB: "Tab",
    Delimiter.PIPE: "Pipe (|)",
}


@dataclass(frozen=True)
class ParsedTable:
    """Rectangular-ish grid of strings produced by one parse call.

    Attributes:
        headers: Column names in file order (not required to be unique)
        rows: Data rows; each has at most ``column_count`` cells
        delimiter: Delimiter used for tokenization (detected or supplied)
        encoding: Codec name used to decode the input (e.g. ``"utf-8"``, ``"cp1252"``)
        row_count: Number of data rows in the full file. A preview keeps the true
            total here even though ``rows`` is truncated.
        column_count: Number of headers
    """
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    delimiter: Delimiter
    encoding: str
    row_count: int
    column_count: int

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def value(self, row: int, column: int) -> str | None:
        """Return one cell, or None when either index is out of range."""
        if not 0 <= row < len(self.rows):
            return None
        cells = self.rows[row]
        if not 0 <= column < len(cells):
            return None
        return cells[column]

    def value_by_header(self, row: int, header: str) -> str | None:
        """Return one cell addressed by header text (first matching header wins)."""
        try:
            column = self.headers.index(header)
        except ValueError:
            return None
        return self.value(row, column)

    def column(self, index: int) -> list[str]:
        """All values of a column; short rows that lack the cell are skipped."""
        return [r[index] for r in self.rows if 0 <= index < len(r)]

    def column_named(self, header: str) -> list[str]:
        try:
            index = self.headers.index(header)
        except ValueError:
            return []
        return self.column(index)

    def to_frame(self) -> pd.DataFrame:
        """Return the data rows as a pandas DataFrame (short rows padded with "")."""
        import pandas as pd

        width = self.column_count
        padded = [list(r) + [""] * (width - len(r)) for r in self.rows]
        # 重複ヘッダでも列位置を保つため RangeIndex で作ってから列名を付与
        frame = pd.DataFrame(padded, columns=range(width), dtype=object)
        frame.columns = list(self.headers)
        return frame
