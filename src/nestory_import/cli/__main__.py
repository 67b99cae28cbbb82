from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..config.loader import ConfigError, DatabaseConfig, ImportConfig, load_config
from ..db.store import InMemoryInventoryStore
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..mapping.column_mapper import ColumnMapper
from ..models.column_mapping import MappingResult
from ..models.import_state import ImportPhase
from ..models.import_summary import ImportSummary
from ..models.parsed_table import Delimiter, ParsedTable
from ..models.target_field import TargetField
from ..services.orchestrator import ImportOrchestrator
from ..services.summary import render_summary_line
from ..tabular.parser import ParseError, preview_path

"""CLI entrypoint: ``nestory-import FILE``.

Flow:
- Load .env (override) and the YAML config
- Parse FILE and auto-map its columns; apply ``--map`` overrides
- Stop with exit 1 when a required field is still unmapped
- Validate rows, then commit them through PostgreSQL (or the in-memory store
  when DISABLE_DB_CONNECT=1)
- Write row errors to the JSON Lines error log and print the SUMMARY line

Exit codes: 0 all rows imported, 2 finished with row errors, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

_DELIMITER_CHOICES = [d.name.lower() for d in Delimiter]


@contextmanager
def _db_connection(db_cfg: DatabaseConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Context manager to provide a psycopg2 cursor.

        接続情報の最終的な解決優先順位 (.env を最優先):
            1. `.env` で読み込まれた環境変数 (main() 冒頭で上書き済み)
            2. 既にプロセスに存在していた環境変数
                 - DATABASE_URL / PGDSN があれば DSN 全体をそのまま使用
                 - 個別 PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
            3. config の database セクション (不足分のフォールバック)
    """
    import psycopg2

    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    conn = psycopg2.connect(dsn)
    # トランザクション境界は PostgresInventoryStore が BEGIN/COMMIT で明示
    conn.autocommit = True
    cur = conn.cursor()
    try:
        yield cur
    finally:
        cur.close()
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True により .env の値で既存環境変数を上書きし、PostgreSQL 接続情報を最優先化。
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _mapping_override(text: str) -> tuple[str, str]:
    column, sep, field = text.rpartition("=")
    if not sep or not column.strip() or not field.strip():
        raise argparse.ArgumentTypeError(f"expected COLUMN=FIELD, got {text!r}")
    return column.strip(), field.strip()


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="nestory-import",
        description="Import home inventory items from a CSV / TSV file",
    )
    p.add_argument("file", type=Path, help="Delimited text file to import (.csv, .tsv, .txt)")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/import.yml)")
    p.add_argument("--delimiter", choices=_DELIMITER_CHOICES, help="Field delimiter (default: auto-detect)")
    p.add_argument("--no-headers", action="store_true", help="First row is data, not headers")
    p.add_argument(
        "--map",
        dest="overrides",
        metavar="COLUMN=FIELD",
        type=_mapping_override,
        action="append",
        default=[],
        help="Override one column mapping (COLUMN: 0-based index or header, FIELD: field name or 'none')",
    )
    p.add_argument("--inspect-data", action="store_true", help="Print a preview and the proposed mapping then exit")
    p.add_argument("--dry-run", action="store_true", help="Parse, map and validate without importing")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_column(table: ParsedTable, column: str) -> int:
    if column.isdigit():
        index = int(column)
        if index >= table.column_count:
            raise ValueError(f"column index out of range: {index}")
        return index
    if column in table.headers:
        return table.headers.index(column)
    lowered = [h.lower() for h in table.headers]
    if column.lower() in lowered:
        return lowered.index(column.lower())
    raise ValueError(f"unknown column: {column!r}")


def _apply_overrides(
    orchestrator: ImportOrchestrator, overrides: Sequence[tuple[str, str]]
) -> None:
    table = orchestrator.parsed_table
    assert table is not None
    for column, field_name in overrides:
        index = _resolve_column(table, column)
        field = None if field_name.lower() == "none" else TargetField.from_value(field_name)
        orchestrator.update_column_mapping(index, field)


def _describe_mapping(mapping: MappingResult) -> list[str]:
    lines = []
    for m in mapping.mappings:
        target = m.target_field.display_name if m.target_field is not None else "-"
        lines.append(f"  [{m.column_index}] {m.column_header!r} -> {target} ({m.confidence:.2f})")
    return lines


def _inspect_data(path: Path, cfg: ImportConfig, delimiter: Delimiter | None) -> int:
    try:
        table = preview_path(path, max_rows=cfg.parser.preview_rows, delimiter=delimiter)
    except ParseError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(
        f"FILE: {path.name} encoding={table.encoding} "
        f"delimiter={table.delimiter.display_name} rows={table.row_count} cols={table.column_count}"
    )
    print(table.to_frame().to_string(index=False))
    mapping = ColumnMapper().analyze_headers(table.headers)
    print("MAPPING:")
    for line in _describe_mapping(mapping):
        print(line)
    for warning in mapping.warnings:
        print(f"  warning: {warning}")
    return EXIT_SUCCESS_ALL


def _execute(orchestrator: ImportOrchestrator, cfg: ImportConfig, logger: logging.Logger) -> ImportSummary | None:
    # DB 接続制御: テスト等で完全に無効化したい場合 DISABLE_DB_CONNECT=1
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
        return orchestrator.execute_import(InMemoryInventoryStore())

    from ..db.postgres_store import PostgresInventoryStore

    with _db_connection(cfg.database) as cur:
        return orchestrator.execute_import(PostgresInventoryStore(cur))


def _write_error_log(source: Path, cfg: ImportConfig, summary: ImportSummary, logger: logging.Logger) -> None:
    if not summary.errors:
        return
    buffer = ErrorLogBuffer(source.name, cfg.error_log_dir)
    buffer.extend(summary.errors)
    log_path = buffer.flush()
    logger.info(f"error log written: {log_path}")


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # 空リスト [] のときに sys.argv[1:] が混入しないよう None のときのみシステム引数を読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    # .env を最優先で読み込む (DB 接続パラメータ優先順位保証)
    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    delimiter = Delimiter.from_name(args.delimiter) if args.delimiter else cfg.parser.delimiter
    has_headers = cfg.parser.has_headers and not args.no_headers

    if args.inspect_data:
        return _inspect_data(args.file, cfg, delimiter)

    start = time.perf_counter()
    orchestrator = ImportOrchestrator(yield_every=cfg.workflow.yield_every)
    orchestrator.parse_file(args.file, delimiter=delimiter, has_headers=has_headers)
    if orchestrator.state.phase is ImportPhase.FAILED:
        return EXIT_FATAL

    try:
        _apply_overrides(orchestrator, args.overrides)
    except ValueError as e:
        logger.error(f"--map: {e}")
        return EXIT_FATAL

    mapping = orchestrator.mapping_result
    assert mapping is not None
    for line in _describe_mapping(mapping):
        logger.debug(line)
    for warning in mapping.warnings:
        logger.warning(warning)
    if not mapping.is_valid:
        logger.error("mapping is incomplete; use --map COLUMN=name to assign the item name column")
        return EXIT_FATAL

    orchestrator.validate_rows()
    table = orchestrator.parsed_table
    assert table is not None

    if args.dry_run or not orchestrator.validated_rows:
        errors = tuple(orchestrator.validation_errors)
        summary = ImportSummary(
            total_rows=table.row_count,
            imported_count=0,
            skipped_count=table.row_count - len(orchestrator.validated_rows),
            error_count=len(errors),
            errors=errors,
            duration_seconds=time.perf_counter() - start,
        )
        _write_error_log(args.file, cfg, summary, logger)
        if not orchestrator.validated_rows:
            logger.error("no valid rows to import")
            log_summary(render_summary_line(summary)[len("SUMMARY "):])
            return EXIT_FATAL
        logger.info(f"dry run: {len(orchestrator.validated_rows)} rows would be imported")
    else:
        try:
            result = _execute(orchestrator, cfg, logger)
        except Exception as e:
            logger.error(f"database: {e}")
            return EXIT_FATAL
        if result is None:
            # orchestrator 側で ERROR ログ済み (Failed to save 等)
            return EXIT_FATAL
        summary = result
        _write_error_log(args.file, cfg, summary, logger)

    # log_summary が "SUMMARY " を付与するため接頭辞を除く
    log_summary(render_summary_line(summary)[len("SUMMARY "):])

    if summary.error_count > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
