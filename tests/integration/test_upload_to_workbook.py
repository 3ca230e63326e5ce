from __future__ import annotations

from pathlib import Path

import pandas as pd

from serial_sheets.config.mapping_store import COLUMN_MAPPING_KEY, InMemoryMappingStore
from serial_sheets.excel.writer import write_workbook
from serial_sheets.models.config_models import ColumnMapping, DuplicatePolicy, GroupingMode, PipelineConfig
from serial_sheets.models.output_record import OUTPUT_HEADERS, IdentityMode
from serial_sheets.models.sheet import Sheet
from serial_sheets.services.pipeline import TableInput, TextInput, load_table, run_pipeline
from serial_sheets.services.record_builder import build_records
from serial_sheets.services.sheet_collection import SheetCollection


def test_upload_xlsx_end_to_end(temp_workdir: Path, make_excel):
    upload = make_excel(
        temp_workdir / "data" / "receipts.xlsx",
        {
            "Receipts": [
                [None, None, None, None],
                ["Part Number", "BOE No", "Quantity", "Serial"],
                ["P1", 1001, 1, "SN001"],
                ["P1", 1001, 1, "SN002"],
                ["P1", 1001, 2, "SN999"],
                ["P2", 1001, 1, "AB12"],
                ["P2", 1001, 1, "AB13"],
                ["P2", None, 1, "AB14"],
            ]
        },
    )
    store = InMemoryMappingStore()
    table = load_table(upload)
    result = run_pipeline(
        TableInput(table=table, mapping=ColumnMapping(quantity="Quantity", serial="Serial")),
        PipelineConfig(mode=IdentityMode.SERIAL, grouping=GroupingMode.INVOICE),
        store,
    )

    assert [s.name for s in result.sheets] == ["P1 - 1001", "P2 - 1001"]
    assert result.sheets[0].identity_values == ["SN001", "SN002"]
    assert result.skipped_rows == 2
    assert result.mismatches == []
    assert store.load(COLUMN_MAPPING_KEY) == {
        "part": "Part Number",
        "invoice": "BOE No",
        "quantity": "Quantity",
        "serial": "Serial",
    }

    collection = SheetCollection()
    collection.extend(result.sheets)
    out = write_workbook(collection.export_tables(), temp_workdir / "out" / "serials")

    assert out.suffix == ".xlsx"
    book = pd.read_excel(out, sheet_name=None, dtype=str)
    assert list(book) == ["Summary", "P1 - 1001", "P2 - 1001"]
    assert list(book["P2 - 1001"].columns) == list(OUTPUT_HEADERS)
    assert list(book["P2 - 1001"]["Serial No."]) == ["AB12", "AB13"]
    assert list(book["Summary"]["Serial Count"]) == ["2", "2"]


def test_saved_mapping_reapplied_on_next_upload(temp_workdir: Path, make_excel):
    upload = make_excel(
        temp_workdir / "data" / "next.xlsx",
        {"S": [["Part Number", "Invoice", "Quantity", "Serial"], ["P9", "I9", 1, "X1"]]},
    )
    store = InMemoryMappingStore({COLUMN_MAPPING_KEY: {"quantity": "Quantity", "serial": "Serial"}})
    result = run_pipeline(
        TableInput(table=load_table(upload)),
        PipelineConfig(mode=IdentityMode.LOT),
        store,
    )
    assert [s.name for s in result.sheets] == ["P9 - I9"]
    assert result.sheets[0].records[0].lot_no == "X1"


def test_long_and_clashing_names_stay_unique_in_workbook(temp_workdir: Path):
    collection = SheetCollection()
    long_name = "PART-0123456789-ABCDEFGHIJ - INVOICE-42"
    for name in (long_name, long_name, "summary", "a/b"):
        collection.append(Sheet(name, build_records(["S1"], IdentityMode.SERIAL)))
    text_result = run_pipeline(
        TextInput(text="L1\nL1\n", sheet_name=""),
        PipelineConfig(mode=IdentityMode.LOT, duplicate_policy=DuplicatePolicy.DROP_SILENTLY),
    )
    collection.extend(text_result.sheets)

    out = write_workbook(collection.export_tables(), temp_workdir / "names.xlsx")
    book = pd.read_excel(out, sheet_name=None, dtype=str)
    names = list(book)

    assert names[0] == "Summary"
    assert len(names) == 6
    assert len({n.lower() for n in names}) == 6
    assert all(len(n) <= 31 for n in names)
    assert "a_b" in names
    assert list(book["Summary"]["Sheet Name"]) == collection.names
    assert collection.names[1] == f"{long_name} (1)"
    assert collection.names[-1] == "Sheet 5"
    assert list(book["Sheet 5"]["Lot No."]) == ["L1"]


def test_na_like_text_is_grouped_not_skipped(temp_workdir: Path, make_excel):
    upload = make_excel(
        temp_workdir / "data" / "na.xlsx",
        {
            "S": [
                ["Part Number", "Invoice No", "Qty", "Serial"],
                ["P1", "N/A", 1, "SN001"],
                ["NA", "I1", 1, "SN002"],
                ["P2", "I2", 1, "NULL"],
            ]
        },
    )
    result = run_pipeline(
        TableInput(table=load_table(upload), mapping=ColumnMapping(quantity="Qty", serial="Serial")),
        PipelineConfig(mode=IdentityMode.SERIAL, grouping=GroupingMode.INVOICE),
    )
    assert [s.name for s in result.sheets] == ["P1 - N/A", "NA - I1", "P2 - I2"]
    assert result.sheets[2].identity_values == ["NULL"]
    assert result.skipped_rows == 0


def test_ragged_csv_upload(temp_workdir: Path):
    src = temp_workdir / "data" / "ragged.csv"
    src.write_text("Part Number,Invoice No,Qty,Serial\nP1,I1,1,SN1,\nP1,I1,1,SN2\n", encoding="utf-8")
    result = run_pipeline(
        TableInput(table=load_table(src), mapping=ColumnMapping(quantity="Qty", serial="Serial")),
        PipelineConfig(mode=IdentityMode.SERIAL),
    )
    assert [s.name for s in result.sheets] == ["P1 - I1"]
    assert result.sheets[0].identity_values == ["SN1", "SN2"]
