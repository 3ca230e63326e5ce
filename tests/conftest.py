# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from serial_sheets.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("SERIAL_SHEETS_OUTPUT", raising=False)
        monkeypatch.delenv("SERIAL_SHEETS_MAPPING_STORE", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_path: out/serials.xlsx
identity_mode: serial
grouping: invoice
validate: true
duplicate_policy: flag-and-keep
has_header: false
column_index: 0
mapping_store: store/mappings.json
mismatch_log_dir: logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "serial_sheets.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_excel():
    """Write a workbook whose sheets are given as lists of rows (no header handling)."""
    def _make(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        with pd.ExcelWriter(path) as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def invoice_rows() -> list[dict[str, object]]:
    return [
        {"Part Number": "P1", "Invoice No": "I1", "Qty": "1", "Serial": "SN001"},
        {"Part Number": "P1", "Invoice No": "I1", "Qty": "1", "Serial": "SN002"},
        {"Part Number": "P1", "Invoice No": "I1", "Qty": "2", "Serial": "SN999"},
    ]


@pytest.fixture()
def fresh_logging():
    reset_logging()
    yield
    reset_logging()
