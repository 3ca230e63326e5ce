from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..models.output_record import OUTPUT_HEADERS
from ..models.sheet import Sheet

"""Clipboard text rendering and a degrading copy helper.

The text is tab-separated: one header line, then one line per row. Writing to
the system clipboard is delegated to injected writers; a failing native writer
falls back to the secondary one and a total failure is only a soft warning.
"""

__all__ = [
    "ClipboardWriter",
    "render_tsv",
    "sheet_to_clipboard_text",
    "copy_text",
]

logger = logging.getLogger(__name__)

ClipboardWriter = Callable[[str], None]


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def render_tsv(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    lines = ["\t".join(headers)]
    lines.extend("\t".join(_cell(v) for v in row) for row in rows)
    return "\n".join(lines)


def sheet_to_clipboard_text(sheet: Sheet) -> str:
    """Header + rows of a sheet in export column order.

    Raises:
        ValueError: if the sheet is empty
    """
    if not sheet.records:
        raise ValueError(f"cannot copy an empty sheet: {sheet.name}")
    rows = [[r.to_row()[h] for h in OUTPUT_HEADERS] for r in sheet.records]
    return render_tsv(OUTPUT_HEADERS, rows)


def copy_text(
    text: str,
    native: ClipboardWriter | None = None,
    fallback: ClipboardWriter | None = None,
) -> bool:
    """Copy text with the native writer, degrading to the fallback.

    Library API for front ends that own a clipboard; the CLI prints the same
    text with --print-tsv instead. Returns True when one of the writers
    succeeded.
    """
    for label, writer in (("native", native), ("fallback", fallback)):
        if writer is None:
            continue
        try:
            writer(text)
        except Exception as e:
            logger.debug(f"{label} clipboard writer failed: {e}")
            continue
        return True
    logger.warning("Failed to copy data to clipboard.")
    return False
