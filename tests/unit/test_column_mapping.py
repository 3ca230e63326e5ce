from __future__ import annotations

from pathlib import Path

import pytest

from serial_sheets.config.mapping_store import (
    COLUMN_MAPPING_KEY,
    InMemoryMappingStore,
    JsonFileMappingStore,
)
from serial_sheets.models.config_models import ColumnMapping, GroupingMode
from serial_sheets.services.column_mapping import detect_columns, remember_mapping, resolve_mapping
from serial_sheets.services.errors import EmptyInputError, MappingError

HEADERS = ["Part Number", "BOE No", "Qty", "Serial"]


def test_detect_columns_prefers_invoice_over_boe():
    assert detect_columns(["Item Part Number", "BOE", "Invoice Ref"]) == ColumnMapping(
        part="Item Part Number", invoice="Invoice Ref"
    )
    assert detect_columns(HEADERS).invoice == "BOE No"


def test_resolve_with_explicit_selection():
    mapping = resolve_mapping(
        HEADERS, GroupingMode.INVOICE, ColumnMapping(quantity="Qty", serial="Serial")
    )
    assert mapping == ColumnMapping(part="Part Number", invoice="BOE No", quantity="Qty", serial="Serial")


def test_resolve_missing_explicit_header_is_mapping_error():
    with pytest.raises(MappingError) as e:
        resolve_mapping(HEADERS, GroupingMode.PART, ColumnMapping(quantity="Quantity", serial="Serial No"))
    assert e.value.missing == ["Quantity", "Serial No"]
    assert "Quantity" in str(e.value)


def test_resolve_unselected_required_column_is_empty_input():
    with pytest.raises(EmptyInputError):
        resolve_mapping(HEADERS, GroupingMode.INVOICE, ColumnMapping(serial="Serial"))


def test_saved_mapping_reapplied_only_for_present_headers():
    store = InMemoryMappingStore(
        {COLUMN_MAPPING_KEY: {"quantity": "Qty", "serial": "Serial", "invoice": "Old Invoice"}}
    )
    mapping = resolve_mapping(HEADERS, GroupingMode.INVOICE, None, store)
    assert mapping.quantity == "Qty"
    assert mapping.serial == "Serial"
    assert mapping.invoice == "BOE No"


def test_explicit_selection_beats_saved_mapping():
    store = InMemoryMappingStore({COLUMN_MAPPING_KEY: {"serial": "Serial", "quantity": "Qty"}})
    headers = HEADERS + ["Lot"]
    mapping = resolve_mapping(headers, GroupingMode.PART, ColumnMapping(serial="Lot"), store)
    assert mapping.serial == "Lot"


def test_remember_mapping_round_trip(tmp_path: Path):
    store = JsonFileMappingStore(tmp_path / "nested" / "mappings.json")
    assert store.load(COLUMN_MAPPING_KEY) is None
    remember_mapping(ColumnMapping(part="P", quantity="Q", serial="S"), store)
    assert store.load(COLUMN_MAPPING_KEY) == {"part": "P", "quantity": "Q", "serial": "S"}
    # a second store instance reads the same file
    assert JsonFileMappingStore(tmp_path / "nested" / "mappings.json").load(COLUMN_MAPPING_KEY)["part"] == "P"


def test_corrupt_store_behaves_as_empty(tmp_path: Path):
    path = tmp_path / "mappings.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileMappingStore(path)
    assert store.load(COLUMN_MAPPING_KEY) is None
    store.save(COLUMN_MAPPING_KEY, {"serial": "S"})
    assert store.load(COLUMN_MAPPING_KEY) == {"serial": "S"}
