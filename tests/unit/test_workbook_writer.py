from __future__ import annotations

from pathlib import Path

import pandas as pd

from serial_sheets.excel.writer import write_workbook
from serial_sheets.models.output_record import OUTPUT_HEADERS, IdentityMode
from serial_sheets.models.sheet import Sheet
from serial_sheets.services.record_builder import build_records
from serial_sheets.services.sheet_collection import SheetCollection


def test_write_workbook_layout(temp_workdir: Path):
    coll = SheetCollection()
    coll.append(Sheet("P1 - I1", build_records(["SN001", "SN002"], IdentityMode.SERIAL)))
    coll.append(Sheet("Lots", build_records(["L1"], IdentityMode.LOT)))

    out = write_workbook(coll.export_tables(), temp_workdir / "out" / "result.xlsx")
    assert out.exists()

    sheets = pd.read_excel(out, sheet_name=None, keep_default_na=False)
    assert list(sheets.keys()) == ["Summary", "P1 - I1", "Lots"]
    summary = sheets["Summary"]
    assert summary["Sheet Name"].tolist() == ["P1 - I1", "Lots"]
    assert summary["Serial Count"].tolist() == [2, 1]

    data = sheets["P1 - I1"]
    assert list(data.columns) == list(OUTPUT_HEADERS)
    assert data["Serial No."].tolist() == ["SN001", "SN002"]
    assert data["Quantity (Base)"].tolist() == [1, 1]
    assert sheets["Lots"]["Lot No."].tolist() == ["L1"]
    assert sheets["Lots"]["Serial No."].tolist() == [""]


def test_write_workbook_forces_xlsx_suffix(temp_workdir: Path):
    coll = SheetCollection()
    coll.append(Sheet("A", build_records(["1"], IdentityMode.SERIAL)))
    out = write_workbook(coll.export_tables(), temp_workdir / "export.dat")
    assert out.name == "export.xlsx"
    assert out.exists()
