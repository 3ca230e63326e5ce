from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

"""Upload reader: workbook or delimited text -> header + Parsed Rows.

The first non-empty row of the chosen sheet is the header, every later
non-empty row is a data row. A row is empty when all of its cells are blank.
Repeated header names get a numeric suffix (Serial, Serial_1, Serial_2) and
columns with a blank header cell are dropped.

Text such as "N/A", "NA" or "NULL" is data, not a missing value: NA
conversion is disabled for workbooks and delimited files alike. Delimited
rows of different widths are padded to the widest row.
"""

__all__ = [
    "UploadReadError",
    "ParsedTable",
    "EXCEL_SUFFIXES",
    "TEXT_SUFFIXES",
    "list_sheet_names",
    "read_raw_grid",
    "dedupe_headers",
    "normalize_upload",
    "read_upload",
]

EXCEL_SUFFIXES = frozenset({".xlsx", ".xlsm", ".xls"})
TEXT_SUFFIXES = frozenset({".csv", ".txt", ".tsv"})


class UploadReadError(Exception):
    """Raised when an upload cannot be decoded or holds no data rows."""


@dataclass
class ParsedTable:
    sheet_name: str
    headers: list[str]
    rows: list[dict[str, Any]]  # header -> raw cell value (None for blank)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _max_width(path: Path, sep: str) -> int:
    with path.open(newline="", encoding="utf-8-sig") as f:
        return max((len(row) for row in csv.reader(f, delimiter=sep)), default=0)


def list_sheet_names(path: Path) -> list[str]:
    """Sheet names of a workbook; delimited text files have a single sheet."""
    if path.suffix.lower() in TEXT_SUFFIXES:
        return [path.stem]
    try:
        with pd.ExcelFile(path) as xls:
            return [str(n) for n in xls.sheet_names]
    except Exception as e:
        raise UploadReadError(f"cannot open workbook {path.name}: {e}") from e


def read_raw_grid(path: Path, sheet: str | None = None) -> tuple[str, pd.DataFrame]:
    """Read one sheet as a header-less DataFrame.

    Parameters
    ----------
    path: workbook (.xlsx/.xlsm/.xls) or delimited text (.csv/.tsv/.txt)
    sheet: sheet to read; None picks the first sheet
    """
    suffix = path.suffix.lower()
    if not path.exists():
        raise UploadReadError(f"file not found: {path}")
    if suffix in TEXT_SUFFIXES:
        sep = "\t" if suffix == ".tsv" else ","
        try:
            width = _max_width(path, sep)
            if width == 0:
                return path.stem, pd.DataFrame()
            # ragged rows (title lines, trailing separators) are padded to the widest row
            df = pd.read_csv(
                path,
                header=None,
                names=range(width),
                sep=sep,
                dtype=str,
                keep_default_na=False,
                na_values=[],
                skip_blank_lines=True,
                encoding="utf-8-sig",
            )
        except pd.errors.EmptyDataError:
            df = pd.DataFrame()
        except Exception as e:
            raise UploadReadError(f"cannot parse {path.name}: {e}") from e
        return path.stem, df
    if suffix not in EXCEL_SUFFIXES:
        raise UploadReadError(f"unsupported file type: {path.suffix or path.name}")
    try:
        with pd.ExcelFile(path) as xls:
            names = [str(n) for n in xls.sheet_names]
            if not names:
                raise UploadReadError(f"workbook {path.name} has no sheets")
            target = names[0] if sheet is None else sheet
            if target not in names:
                raise UploadReadError(f"sheet '{target}' not found in {path.name} (available: {names})")
            df = xls.parse(target, header=None, keep_default_na=False, na_values=[])
    except UploadReadError:
        raise
    except Exception as e:
        raise UploadReadError(f"cannot read workbook {path.name}: {e}") from e
    return target, df


def dedupe_headers(cells: list[Any]) -> list[str | None]:
    """Header text per column; None for blank cells, suffixes for repeats."""
    seen: dict[str, int] = {}
    used: set[str] = set()
    headers: list[str | None] = []
    for cell in cells:
        if _is_blank(cell):
            headers.append(None)
            continue
        text = str(int(cell)) if isinstance(cell, float) and cell.is_integer() else str(cell).strip()
        name = text
        while name in used:
            seen[text] = seen.get(text, 0) + 1
            name = f"{text}_{seen[text]}"
        used.add(name)
        headers.append(name)
    return headers


def normalize_upload(df: pd.DataFrame, sheet_name: str) -> ParsedTable:
    """Turn a header-less grid into a ParsedTable.

    Raises:
        UploadReadError: fewer than two non-empty rows
    """
    grid = [row for row in df.itertuples(index=False, name=None) if not all(_is_blank(v) for v in row)]
    if len(grid) < 2:
        raise UploadReadError(f"sheet '{sheet_name}' appears to be empty or has no data rows")
    columns = dedupe_headers(list(grid[0]))
    rows: list[dict[str, Any]] = []
    for raw in grid[1:]:
        row: dict[str, Any] = {}
        for header, value in zip(columns, raw, strict=False):
            if header is None:
                continue
            row[header] = None if _is_blank(value) else value
        rows.append(row)
    return ParsedTable(
        sheet_name=sheet_name,
        headers=[h for h in columns if h is not None],
        rows=rows,
    )


def read_upload(path: Path, sheet: str | None = None) -> ParsedTable:
    """Read and normalize an uploaded file (first sheet unless one is named)."""
    name, df = read_raw_grid(path, sheet)
    return normalize_upload(df, name)
