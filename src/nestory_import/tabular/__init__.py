"""Delimited text (CSV / TSV / plain text) parsing."""

from .parser import (
    SUPPORTED_EXTENSIONS,
    EmptyInputError,
    EncodingDetectionError,
    NoHeadersError,
    ParseError,
    SourceNotFoundError,
    UnreadableSourceError,
    decode_bytes,
    detect_delimiter,
    detect_encoding,
    is_supported,
    parse,
    parse_path,
    parse_text,
    preview,
    preview_path,
    tokenize,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "ParseError",
    "EmptyInputError",
    "EncodingDetectionError",
    "NoHeadersError",
    "SourceNotFoundError",
    "UnreadableSourceError",
    "decode_bytes",
    "detect_delimiter",
    "detect_encoding",
    "is_supported",
    "parse",
    "parse_path",
    "parse_text",
    "preview",
    "preview_path",
    "tokenize",
]
