from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from nestory_import.cli import main as cli_main


@pytest.fixture()
def mock_db(monkeypatch):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")


def _write(temp_workdir: Path, name: str, content: str) -> Path:
    f = temp_workdir / "data" / name
    f.write_text(content, encoding="utf-8")
    return f


def test_cli_success_mock_mode(write_inventory: Path, mock_db, capsys):
    code = cli_main([str(write_inventory)])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY rows=3 imported=5 skipped=0 errors=0" in out


def test_cli_missing_file(temp_workdir: Path, mock_db, capsys):
    code = cli_main(["data/nope.csv"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR File not found" in out


def test_cli_bad_config_path(write_inventory: Path, capsys):
    code = cli_main([str(write_inventory), "--config", "config/missing.yml"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: config file not found" in out


def test_cli_row_errors_exit_2_and_write_error_log(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.csv", "Name,Price\nLamp,abc\n,5\nDesk,10\n")
    code = cli_main([str(f)])
    out = capsys.readouterr().out
    assert code == 2
    assert "SUMMARY rows=3 imported=2 skipped=1 errors=2" in out

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    lines = [json.loads(x) for x in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [(x["row"], x["field"]) for x in lines] == [(2, "Purchase Price"), (3, "Name")]
    assert all(x["file"] == "items.csv" for x in lines)


def test_cli_invalid_mapping_exits_before_import(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.csv", "Brand,Price\nIKEA,5\n")
    code = cli_main([str(f)])
    out = capsys.readouterr().out
    assert code == 1
    assert "WARN Required fields not mapped: Item Name" in out
    assert "SUMMARY" not in out


def test_cli_map_override_fixes_mapping(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.csv", "Brand,Thing\nIKEA,Lamp\n")
    code = cli_main([str(f), "--map", "Thing=name"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY rows=1 imported=1" in out


def test_cli_map_by_index_and_clear(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.csv", "Item Name,Brand\nLamp,IKEA\n")
    code = cli_main([str(f), "--map", "1=none", "--map", "0=Item Name"])
    assert code == 0


def test_cli_map_unknown_field(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.csv", "Name\nLamp\n")
    code = cli_main([str(f), "--map", "Name=colour"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR --map: unknown target field" in out


def test_cli_map_unknown_column(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.csv", "Name\nLamp\n")
    code = cli_main([str(f), "--map", "7=brand"])
    out = capsys.readouterr().out
    assert code == 1
    assert "column index out of range" in out


def test_cli_map_requires_equals(temp_workdir: Path):
    with pytest.raises(SystemExit):
        cli_main(["x.csv", "--map", "Name"])


def test_cli_dry_run_does_not_import(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.csv", "Name,Price\nLamp,1\nDesk,oops\n")
    with patch("nestory_import.cli.__main__._execute") as execute:
        code = cli_main([str(f), "--dry-run"])
    out = capsys.readouterr().out
    execute.assert_not_called()
    assert code == 2
    assert "dry run: 2 rows would be imported" in out
    assert "SUMMARY rows=2 imported=0 skipped=0 errors=1" in out


def test_cli_no_valid_rows_is_fatal(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.csv", "Name,Price\n,1\n")
    code = cli_main([str(f)])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR no valid rows to import" in out


def test_cli_inspect_data(write_inventory: Path, capsys):
    code = cli_main([str(write_inventory), "--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: inventory.csv encoding=utf-8 delimiter=Comma (,) rows=3 cols=8" in out
    assert "Television" in out
    assert "MAPPING:" in out
    assert "'Price' -> Purchase Price (1.00)" in out


def test_cli_inspect_data_missing_file(temp_workdir: Path, capsys):
    code = cli_main(["data/none.csv", "--inspect-data"])
    assert code == 1
    assert "inspect: File not found" in capsys.readouterr().out


def test_cli_debug_mode(write_inventory: Path, mock_db, capsys):
    code = cli_main([str(write_inventory), "--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG DB connect disabled via DISABLE_DB_CONNECT=1" in out


def test_cli_delimiter_and_no_headers(temp_workdir: Path, mock_db, capsys):
    f = _write(temp_workdir, "items.txt", "Lamp;IKEA\nDesk;IKEA\n")
    code = cli_main([str(f), "--delimiter", "semicolon", "--no-headers", "--map", "0=name"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY rows=2 imported=2" in out


class TestLiveMode:
    @pytest.fixture(autouse=True)
    def live(self, monkeypatch):
        monkeypatch.delenv("DISABLE_DB_CONNECT", raising=False)

    def _fake_connection(self, cursor):
        @contextmanager
        def fake(db_cfg):
            yield cursor

        return fake

    def test_live_commit(self, write_inventory: Path, capsys):
        cursor = MagicMock()
        cursor.fetchall.return_value = [(1, "Furniture")]
        with patch("nestory_import.cli.__main__._db_connection", self._fake_connection(cursor)), \
             patch("nestory_import.db.batch_insert.execute_values") as ev:
            code = cli_main([str(write_inventory)])

        out = capsys.readouterr().out
        assert code == 0
        assert "SUMMARY rows=3 imported=5" in out
        ev.assert_called_once()
        assert len(ev.call_args.args[2]) == 5
        cursor.execute.assert_any_call("BEGIN")
        cursor.execute.assert_any_call("COMMIT")

    def test_live_commit_failure_is_fatal(self, write_inventory: Path, capsys):
        cursor = MagicMock()
        cursor.fetchall.return_value = []
        with patch("nestory_import.cli.__main__._db_connection", self._fake_connection(cursor)), \
             patch("nestory_import.db.batch_insert.execute_values", side_effect=RuntimeError("duplicate key")):
            code = cli_main([str(write_inventory)])

        out = capsys.readouterr().out
        assert code == 1
        assert "ERROR Failed to save: duplicate key" in out
        assert "SUMMARY" not in out

    def test_live_connection_failure_is_fatal(self, write_inventory: Path, capsys):
        with patch(
            "nestory_import.cli.__main__._db_connection",
            side_effect=RuntimeError("could not connect to server"),
        ):
            code = cli_main([str(write_inventory)])

        out = capsys.readouterr().out
        assert code == 1
        assert "ERROR database: could not connect to server" in out
