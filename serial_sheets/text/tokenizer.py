from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

"""Line tokenizer and field extractor for pasted text.

Pasted text has no quoting: a line is split on TAB when it contains one,
otherwise on comma. Missing fields are "absent" (None), never an error.
"""

__all__ = [
    "tokenize_line",
    "tokenize_lines",
    "extract_field",
    "extract_named_field",
    "extract_column",
    "cell_text",
]


def tokenize_line(line: str) -> list[str]:
    """Split one line on TAB if present, else on comma."""
    if "\t" in line:
        return line.split("\t")
    return line.split(",")


def tokenize_lines(text: str, has_header: bool = False) -> list[list[str]]:
    """Split raw pasted text into Raw Rows.

    Lines that are blank after trimming are dropped before the header flag is
    applied, so a leading blank line never swallows the header.
    """
    lines = [line.rstrip("\r") for line in text.split("\n") if line.strip() != ""]
    if has_header:
        lines = lines[1:]
    return [tokenize_line(line) for line in lines]


def cell_text(value: Any) -> str:
    """Render a cell value as trimmed text.

    Spreadsheet readers hand back integral numbers as floats (12345.0); those
    are rendered without the fractional part. None and NaN become "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def extract_field(row: list[str], index: int) -> str | None:
    """Trimmed field at a zero-based index, or None when absent/blank."""
    if index < 0 or index >= len(row):
        return None
    value = row[index].strip()
    return value or None


def extract_named_field(row: Mapping[str, Any], header: str) -> str | None:
    """Trimmed field for a column header, or None when absent/blank."""
    if header not in row:
        return None
    value = cell_text(row[header])
    return value or None


def extract_column(rows: Iterable[list[str]], index: int) -> list[str]:
    """Pull one field per row, dropping absent values entirely."""
    values: list[str] = []
    for row in rows:
        value = extract_field(row, index)
        if value is not None:
            values.append(value)
    return values
