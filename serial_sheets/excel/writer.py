from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..services.sheet_collection import SUMMARY_SHEET_NAME, ExportTables

"""Workbook writer: ExportTables -> .xlsx via pandas + openpyxl.

Layout: "Summary" first, then one sheet per collection entry, each with the
eleven export columns as its header row.
"""

__all__ = [
    "WorkbookWriteError",
    "write_workbook",
]

logger = logging.getLogger(__name__)


class WorkbookWriteError(Exception):
    """Raised when the output workbook cannot be written."""


def write_workbook(tables: ExportTables, path: Path) -> Path:
    """Write the summary and sheet tables to an .xlsx file and return its path."""
    if path.suffix.lower() != ".xlsx":
        path = path.with_suffix(".xlsx")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            tables.summary.to_excel(writer, sheet_name=SUMMARY_SHEET_NAME, index=False)
            for name, frame in tables.sheets:
                frame.to_excel(writer, sheet_name=name, index=False)
    except OSError as e:
        raise WorkbookWriteError(f"cannot write {path}: {e}") from e
    logger.debug(f"wrote {len(tables.sheets)} sheet(s) to {path}")
    return path
