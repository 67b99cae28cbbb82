from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.parsed_table import Delimiter

"""Config loader.

Responsibilities:
- Load YAML (default config/import.yml)
- Validate against the bundled config_schema.json
- Apply defaults for every optional key

An explicitly given path must exist. The default path may be absent, in which
case every setting takes its default.
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "ParserConfig",
    "WorkflowConfig",
    "DatabaseConfig",
    "ImportConfig",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ParserConfig:
    delimiter: Delimiter | None = None  # None = auto-detect
    has_headers: bool = True
    preview_rows: int = 10


@dataclass(frozen=True)
class WorkflowConfig:
    yield_every: int = 10


@dataclass(frozen=True)
class DatabaseConfig:
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    parser: ParserConfig = field(default_factory=ParserConfig)
    workflow: WorkflowConfig = field(default_factory=WorkflowConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    error_log_dir: Path = Path("./logs")


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or broken, or the data violates it
            (unknown keys, wrong types, out-of-range values).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None) -> ImportConfig:
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ImportConfig()
        path = DEFAULT_CONFIG_PATH
    elif not path.exists():
        raise ConfigError(f"config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    parser_raw = data.get("parser") or {}
    delimiter_name = parser_raw.get("delimiter")
    parser = ParserConfig(
        delimiter=Delimiter.from_name(delimiter_name) if delimiter_name else None,
        has_headers=parser_raw.get("has_headers", True),
        preview_rows=parser_raw.get("preview_rows", 10),
    )
    workflow_raw = data.get("workflow") or {}
    workflow = WorkflowConfig(yield_every=workflow_raw.get("yield_every", 10))

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    log_raw = data.get("logging") or {}
    return ImportConfig(
        parser=parser,
        workflow=workflow,
        database=db,
        error_log_dir=Path(log_raw.get("error_log_dir", "./logs")),
    )
