# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from nestory_import.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """parser:
  delimiter: null
  has_headers: true
  preview_rows: 5
workflow:
  yield_every: 2
logging:
  error_log_dir: ./logs
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: inventory
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def inventory_csv() -> str:
    return (
        "Item Name,Brand,Price,Purchase Date,Condition,Category,Room,Quantity\n"
        "Lamp,IKEA,29.99,2023-01-15,Like New,Furniture,Living Room,1\n"
        "Television,Sony,\"$1,299.00\",03/20/2022,excellent,electronics,living room,1\n"
        "Coffee Mug,,4.50,,worn,Kitchenware,Kitchen,3\n"
    )


@pytest.fixture()
def write_inventory(temp_workdir: Path, inventory_csv: str) -> Path:
    f = temp_workdir / "data" / "inventory.csv"
    f.write_text(inventory_csv, encoding="utf-8")
    return f
