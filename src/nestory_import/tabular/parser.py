from __future__ import annotations

import logging
import re
from pathlib import Path

from ..models.parsed_table import Delimiter, ParsedTable

"""Delimited text parser.

Turns raw bytes (or an already-decoded string) into a ParsedTable:

1. Encoding: BOM sniffing (UTF-8 / UTF-16LE / UTF-16BE), then strict UTF-8,
   then cp1252, then ISO-8859-1 which always succeeds.
2. Delimiter: if not supplied, count comma / semicolon / tab / pipe outside
   quotes on the first line; highest count wins, ties go to declaration order,
   no hits means comma.
3. Tokenizing: one left-to-right scan with an in-quotes flag. ``""`` inside a
   quoted region is a literal quote. ``\\r`` is ignored, ``\\n`` outside quotes
   ends a row, blank lines and all-empty rows are dropped, cells are trimmed.
4. Headers: first row (trimmed) or synthetic "Column A", "Column B", ...
"""

__all__ = [
    "ParseError",
    "EmptyInputError",
    "EncodingDetectionError",
    "NoHeadersError",
    "SourceNotFoundError",
    "UnreadableSourceError",
    "SUPPORTED_EXTENSIONS",
    "detect_encoding",
    "decode_bytes",
    "detect_delimiter",
    "tokenize",
    "parse",
    "parse_text",
    "parse_path",
    "preview",
    "preview_path",
    "is_supported",
]

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("csv", "tsv", "txt")

_BOMS: tuple[tuple[bytes, str, str], ...] = (
    # (bom, codec used for decoding, reported encoding)
    (b"\xef\xbb\xbf", "utf-8", "utf-8"),
    (b"\xff\xfe", "utf-16-le", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be", "utf-16-be"),
)
_FALLBACK_CODECS = ("utf-8", "cp1252")
_LAST_RESORT_CODEC = "iso-8859-1"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_CELL_WHITESPACE = " \t"


class ParseError(Exception):
    """Base class for fatal parse errors."""


class SourceNotFoundError(ParseError):
    """Raised when the input file does not exist."""

    def __init__(self, message: str = "File not found") -> None:
        super().__init__(message)


class UnreadableSourceError(ParseError):
    """Raised when the input file exists but cannot be read."""

    def __init__(self, message: str = "Unable to read file") -> None:
        super().__init__(message)


class EncodingDetectionError(ParseError):
    """Raised when no codec could decode the input."""

    def __init__(self, message: str = "Could not detect file encoding") -> None:
        super().__init__(message)


class EmptyInputError(ParseError):
    """Raised when the input is empty or whitespace only."""

    def __init__(self, message: str = "File is empty") -> None:
        super().__init__(message)


class NoHeadersError(ParseError):
    """Raised when the header sequence is empty after extraction."""

    def __init__(self, message: str = "No header row found") -> None:
        super().__init__(message)


def detect_encoding(data: bytes) -> str:
    """Return the codec name the parser would use for ``data``."""
    return decode_bytes(data)[1]


def decode_bytes(data: bytes) -> tuple[str, str]:
    """Decode ``data`` returning ``(text, encoding_name)``.

    A byte-order mark is stripped from the returned text. When a BOM is present
    but the payload does not decode with that codec (e.g. odd UTF-16 length),
    detection falls through to the non-BOM chain.
    """
    for bom, codec, name in _BOMS:
        if data.startswith(bom):
            try:
                return data[len(bom):].decode(codec), name
            except UnicodeDecodeError:
                logger.debug("BOM %s present but payload is not %s", bom.hex(), codec)
                break

    for codec in _FALLBACK_CODECS:
        try:
            return data.decode(codec), codec
        except UnicodeDecodeError:
            continue

    # ISO-8859-1 は全バイトを写像できるので通常ここで失敗しない
    try:
        return data.decode(_LAST_RESORT_CODEC), _LAST_RESORT_CODEC
    except UnicodeDecodeError as e:  # pragma: no cover
        raise EncodingDetectionError() from e


def detect_delimiter(content: str) -> Delimiter:
    """Pick the delimiter occurring most often outside quotes on the first line."""
    first_line = _LINE_BREAK.split(content, maxsplit=1)[0]
    counts = {d: 0 for d in Delimiter}
    in_quotes = False
    for ch in first_line:
        if ch == '"':
            in_quotes = not in_quotes
        elif not in_quotes:
            for d in Delimiter:
                if ch == d.value:
                    counts[d] += 1

    # max() は最初の最大値を返すので宣言順 (comma > semicolon > tab > pipe) で決まる
    best = max(Delimiter, key=lambda d: counts[d])
    if counts[best] == 0:
        return Delimiter.COMMA
    return best


def _trim(cell: str) -> str:
    return cell.strip(_CELL_WHITESPACE)


def tokenize(content: str, delimiter: Delimiter) -> list[list[str]]:
    """Split ``content`` into rows of trimmed cells.

    Rows whose cells are all empty are dropped; short rows are returned as-is.
    """
    sep = delimiter.value
    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False

    def finish_row() -> None:
        row.append(_trim("".join(field)))
        if any(cell for cell in row):
            rows.append(list(row))

    i = 0
    n = len(content)
    while i < n:
        ch = content[i]
        if ch == '"':
            if in_quotes and i + 1 < n and content[i + 1] == '"':
                field.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif in_quotes:
            field.append(ch)
        elif ch == sep:
            row.append(_trim("".join(field)))
            field.clear()
        elif ch == "\r":
            pass
        elif ch == "\n":
            if field or row:
                finish_row()
                row.clear()
                field.clear()
        else:
            field.append(ch)
        i += 1

    if field or row:
        finish_row()
    return rows


def _column_label(index: int) -> str:
    """Spreadsheet-style column letters: 0 -> A, 25 -> Z, 26 -> AA."""
    label = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        label = chr(65 + rem) + label
    return label


def parse_text(
    content: str,
    delimiter: Delimiter | None = None,
    has_headers: bool = True,
    encoding: str = "utf-8",
) -> ParsedTable:
    """Parse already-decoded text into a ParsedTable.

    Raises:
        EmptyInputError: content is empty or whitespace only
        NoHeadersError: no header cells could be extracted
    """
    trimmed = content.strip()
    if not trimmed:
        raise EmptyInputError()

    used = delimiter or detect_delimiter(trimmed)
    logger.debug("using delimiter %r", used.value)

    all_rows = tokenize(trimmed, used)
    if not all_rows:
        raise EmptyInputError()

    if has_headers:
        headers = [_trim(h) for h in all_rows[0]]
        data_rows = all_rows[1:]
    else:
        headers = [f"Column {_column_label(i)}" for i in range(len(all_rows[0]))]
        data_rows = all_rows

    if not headers:
        raise NoHeadersError()

    width = len(headers)
    rows = tuple(tuple(r[:width]) for r in data_rows)
    logger.info("Parsed %d rows with %d columns", len(rows), width)
    return ParsedTable(
        headers=tuple(headers),
        rows=rows,
        delimiter=used,
        encoding=encoding,
        row_count=len(rows),
        column_count=width,
    )


def parse(
    data: bytes | str,
    delimiter: Delimiter | None = None,
    has_headers: bool = True,
) -> ParsedTable:
    """Parse a raw byte buffer (or string) into a ParsedTable."""
    if isinstance(data, str):
        return parse_text(data, delimiter=delimiter, has_headers=has_headers)
    if not data.strip():
        raise EmptyInputError()
    text, encoding = decode_bytes(data)
    logger.debug("detected encoding: %s", encoding)
    return parse_text(text, delimiter=delimiter, has_headers=has_headers, encoding=encoding)


def _read_source(path: Path) -> bytes:
    if not path.exists():
        raise SourceNotFoundError()
    try:
        return path.read_bytes()
    except OSError as e:
        raise UnreadableSourceError() from e


def parse_path(
    path: Path | str,
    delimiter: Delimiter | None = None,
    has_headers: bool = True,
) -> ParsedTable:
    """Read and parse a file. Extension is informational and not enforced."""
    path = Path(path)
    logger.info("Parsing delimited file: %s", path.name)
    return parse(_read_source(path), delimiter=delimiter, has_headers=has_headers)


def _truncate(table: ParsedTable, max_rows: int) -> ParsedTable:
    return ParsedTable(
        headers=table.headers,
        rows=table.rows[:max(max_rows, 0)],
        delimiter=table.delimiter,
        encoding=table.encoding,
        row_count=table.row_count,
        column_count=table.column_count,
    )


def preview(
    data: bytes | str,
    max_rows: int = 10,
    delimiter: Delimiter | None = None,
) -> ParsedTable:
    """Full parse, then keep only the first ``max_rows`` rows.

    row_count still reports the total number of data rows.
    """
    return _truncate(parse(data, delimiter=delimiter), max_rows)


def preview_path(
    path: Path | str,
    max_rows: int = 10,
    delimiter: Delimiter | None = None,
) -> ParsedTable:
    return _truncate(parse_path(path, delimiter=delimiter), max_rows)


def is_supported(path: Path | str) -> bool:
    """True when the file extension is one of csv / tsv / txt (case-insensitive)."""
    return Path(path).suffix.lower().lstrip(".") in SUPPORTED_EXTENSIONS
