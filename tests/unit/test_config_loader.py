from __future__ import annotations

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from nestory_import.config.loader import (
    ConfigError,
    ImportConfig,
    _validate_config_schema,
    load_config,
)
from nestory_import.models.parsed_table import Delimiter


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.parser.delimiter is None
    assert cfg.parser.has_headers is True
    assert cfg.parser.preview_rows == 5
    assert cfg.workflow.yield_every == 2
    assert cfg.error_log_dir == Path("./logs")
    assert cfg.database.host == "localhost"
    assert cfg.database.port == 5432
    assert cfg.database.database == "inventory"
    assert cfg.database.dsn is None


def test_default_path_absent_uses_defaults(temp_workdir: Path):
    assert load_config() == ImportConfig()


def test_default_path_is_read_when_present(write_config: Path):
    cfg = load_config()
    assert cfg.workflow.yield_every == 2


def test_empty_file_uses_defaults(temp_workdir: Path):
    f = temp_workdir / "config" / "empty.yml"
    f.write_text("", encoding="utf-8")
    cfg = load_config(f)
    assert cfg.parser.preview_rows == 10
    assert cfg.workflow.yield_every == 10


def test_delimiter_name_resolved(temp_workdir: Path):
    f = temp_workdir / "config" / "tsv.yml"
    f.write_text("parser:\n  delimiter: tab\n  has_headers: false\n", encoding="utf-8")
    cfg = load_config(f)
    assert cfg.parser.delimiter is Delimiter.TAB
    assert cfg.parser.has_headers is False


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(missing)


def test_load_config_invalid_yaml(temp_workdir: Path):
    f = temp_workdir / "config" / "broken.yml"
    f.write_text("parser: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(f)


def test_load_config_extra_field(write_config: Path):
    # additionalProperties: false
    text = write_config.read_text(encoding="utf-8") + "\nsource_directory: ./data\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


@pytest.mark.parametrize(
    "snippet",
    [
        "parser:\n  delimiter: colon\n",
        "parser:\n  preview_rows: 0\n",
        "workflow:\n  yield_every: fast\n",
        "database:\n  port: 70000\n",
    ],
)
def test_load_config_rejects_bad_values(temp_workdir: Path, snippet: str):
    f = temp_workdir / "config" / "bad.yml"
    f.write_text(snippet, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(f)


def test_validate_config_schema_missing_schema_file():
    with patch("nestory_import.config.loader.SCHEMA_PATH", Path("/nonexistent/schema.json")):
        with pytest.raises(ConfigError, match="config schema not found"):
            _validate_config_schema({})


def test_validate_config_schema_invalid_json_schema():
    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        f.write("{ invalid json }")
        temp_path = Path(f.name)
    try:
        with patch("nestory_import.config.loader.SCHEMA_PATH", temp_path):
            with pytest.raises(ConfigError, match="invalid schema file"):
                _validate_config_schema({})
    finally:
        temp_path.unlink()
