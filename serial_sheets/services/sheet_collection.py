from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

import pandas as pd

from ..models.output_record import OUTPUT_HEADERS, IdentityMode
from ..models.sheet import Sheet
from .errors import EmptyInputError

"""Ordered, name-unique collection of sheets awaiting export.

The collection is the only state that survives between pipeline runs. It is
mutated only after a run succeeded, from a single thread, so no locking is
involved.

Export produces pandas tables: a summary (sheet name, record count) and one
table per sheet under a workbook-safe name. Workbook names are limited to 31
characters, may not contain []:*?/\\ and are compared case-insensitively by
spreadsheet applications, so they are sanitized and made unique again after
truncation. "Summary" is reserved for the summary sheet.
"""

__all__ = [
    "ExportTables",
    "SheetCollection",
    "MAX_SHEET_NAME_LENGTH",
    "SUMMARY_SHEET_NAME",
    "SUMMARY_COLUMNS",
    "workbook_sheet_name",
]

MAX_SHEET_NAME_LENGTH = 31
SUMMARY_SHEET_NAME = "Summary"
SUMMARY_COLUMNS = ("Sheet Name", "Serial Count")
_INVALID_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")


@dataclass(frozen=True)
class ExportTables:
    summary: pd.DataFrame
    sheets: list[tuple[str, pd.DataFrame]]  # (workbook name, table), collection order


def _suffixed(base: str, n: int, limit: int | None = None) -> str:
    suffix = f" ({n})"
    if limit is not None:
        base = base[: limit - len(suffix)]
    return f"{base}{suffix}"


def workbook_sheet_name(name: str, taken: set[str]) -> str:
    """Return a sanitized, truncated, unique workbook name and register it.

    `taken` holds lower-cased names already used in the workbook.
    """
    base = _INVALID_TITLE_CHARS.sub("_", name).strip()[:MAX_SHEET_NAME_LENGTH] or "Sheet"
    candidate = base
    n = 1
    while candidate.lower() in taken:
        candidate = _suffixed(base, n, MAX_SHEET_NAME_LENGTH)
        n += 1
    taken.add(candidate.lower())
    return candidate


class SheetCollection:
    """Process-local ordered list of sheets with unique names."""

    def __init__(self) -> None:
        self._sheets: list[Sheet] = []

    def __len__(self) -> int:
        return len(self._sheets)

    def __iter__(self) -> Iterator[Sheet]:
        return iter(self._sheets)

    def __getitem__(self, index: int) -> Sheet:
        return self._sheets[index]

    @property
    def names(self) -> list[str]:
        return [s.name for s in self._sheets]

    def _unique_name(self, name: str, exclude: int | None = None) -> str:
        taken = {s.name for i, s in enumerate(self._sheets) if i != exclude}
        if name not in taken:
            return name
        n = 1
        while _suffixed(name, n) in taken:
            n += 1
        return _suffixed(name, n)

    def _default_name(self) -> str:
        return f"Sheet {len(self._sheets) + 1}"

    def append(self, sheet: Sheet) -> Sheet:
        """Add a sheet at the end; returns the sheet as stored (final name)."""
        name = sheet.name.strip() or self._default_name()
        stored = sheet.renamed(self._unique_name(name))
        self._sheets.append(stored)
        return stored

    def extend(self, sheets: list[Sheet]) -> list[Sheet]:
        return [self.append(s) for s in sheets]

    def replace(self, index: int, sheet: Sheet) -> Sheet:
        """Overwrite the sheet at index, keeping its position.

        Raises:
            IndexError: if index is out of range
        """
        current = self._sheets[index]
        name = sheet.name.strip() or current.name
        stored = sheet.renamed(self._unique_name(name, exclude=index))
        self._sheets[index] = stored
        return stored

    def remove(self, index: int) -> Sheet:
        """Delete and return the sheet at index (caller confirms intent)."""
        return self._sheets.pop(index)

    def edit_text(self, index: int) -> tuple[str, IdentityMode]:
        """Text and mode that repopulate the manual input for editing a sheet."""
        sheet = self._sheets[index]
        return "\n".join(sheet.identity_values), sheet.mode

    def export_tables(self) -> ExportTables:
        """Build the summary table and the per-sheet tables.

        Raises:
            EmptyInputError: if the collection is empty
        """
        if not self._sheets:
            raise EmptyInputError("no sheets to export")
        summary = pd.DataFrame(
            [(s.name, len(s)) for s in self._sheets],
            columns=list(SUMMARY_COLUMNS),
        )
        taken = {SUMMARY_SHEET_NAME.lower()}
        tables: list[tuple[str, pd.DataFrame]] = []
        for sheet in self._sheets:
            frame = pd.DataFrame([r.to_row() for r in sheet.records], columns=list(OUTPUT_HEADERS))
            tables.append((workbook_sheet_name(sheet.name, taken), frame))
        return ExportTables(summary=summary, sheets=tables)
