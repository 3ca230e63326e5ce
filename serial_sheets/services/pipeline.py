from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..config.mapping_store import MappingStore
from ..excel.reader import ParsedTable, UploadReadError, read_upload
from ..models.config_models import ColumnMapping, PipelineConfig
from ..models.mismatch_record import MismatchRecord
from ..models.pipeline_result import PipelineResult
from ..models.sheet import Sheet
from ..text.tokenizer import extract_column, tokenize_lines
from .column_mapping import remember_mapping, resolve_mapping
from .errors import EmptyInputError, MappingError, ParseError, PipelineError
from .grouping import group_rows
from .progress import ProgressTracker
from .record_builder import build_records
from .validator import validate_values

"""Pipeline command interface.

One user action (paste + add, upload + process) is one synchronous call:

    run_pipeline(source, config, store) -> PipelineResult

The pipeline is unaware of any front end and never mutates a SheetCollection;
the caller appends result.sheets only after the call returned. Every failure
is raised as a PipelineError subclass.
"""

__all__ = [
    "TextInput",
    "TableInput",
    "PipelineError",
    "EmptyInputError",
    "ParseError",
    "MappingError",
    "load_table",
    "run_text_pipeline",
    "run_table_pipeline",
    "run_pipeline",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextInput:
    """Pasted text, one serial/lot number per line in a chosen column."""
    text: str
    column_index: int = 0
    has_header: bool = False
    sheet_name: str = ""  # blank -> "Sheet N" when appended


@dataclass(frozen=True)
class TableInput:
    """An uploaded table plus the caller's explicit column selections."""
    table: ParsedTable
    mapping: ColumnMapping | None = None
    sheet_name: str = ""  # sheet name for GroupingMode.NONE (default: table sheet name)


def load_table(path: Path, sheet: str | None = None) -> ParsedTable:
    """Read an upload, converting reader failures into ParseError."""
    try:
        return read_upload(path, sheet)
    except UploadReadError as e:
        raise ParseError(f"Failed to read file: {e}") from e


def run_text_pipeline(source: TextInput, config: PipelineConfig) -> PipelineResult:
    """Manual path: tokenize -> extract -> validate -> build one sheet."""
    rows = tokenize_lines(source.text, has_header=source.has_header)
    values = extract_column(rows, source.column_index)
    if not values:
        raise EmptyInputError("No valid entries found in the text.")

    name = source.sheet_name.strip()
    kept, mismatches = validate_values(
        values,
        group=name,
        duplicate_policy=config.duplicate_policy,
        validate=config.validate,
    )
    sheet = Sheet(name=name, records=build_records(kept, config.mode))
    logger.debug(f"text input: lines={len(rows)} values={len(values)} kept={len(kept)}")
    return PipelineResult(
        sheets=[sheet],
        mismatches=mismatches,
        skipped_rows=len(rows) - len(values),
    )


def run_table_pipeline(
    source: TableInput,
    config: PipelineConfig,
    store: MappingStore | None = None,
) -> PipelineResult:
    """Upload path: resolve columns -> group -> validate -> build sheets.

    The resolved mapping is saved to the store only when the run succeeds.
    """
    table = source.table
    mapping = resolve_mapping(table.headers, config.grouping, source.mapping, store)
    logger.debug(f"column mapping: {mapping.to_dict()}")

    grouping = group_rows(
        table.rows,
        mapping,
        config.grouping,
        default_key=source.sheet_name.strip() or table.sheet_name,
    )

    sheets: list[Sheet] = []
    mismatches: list[MismatchRecord] = []
    with ProgressTracker(len(grouping.groups)) as progress:
        for group in grouping.groups:
            kept, found = validate_values(
                group.values,
                group=group.key,
                duplicate_policy=config.duplicate_policy,
                validate=config.validate,
            )
            sheets.append(Sheet(name=group.key, records=build_records(kept, config.mode)))
            mismatches.extend(found)
            progress.advance(group.key)

    if not sheets:
        logger.warning(f"no rows of '{table.sheet_name}' passed the key and quantity filters")
    remember_mapping(mapping, store)
    return PipelineResult(sheets=sheets, mismatches=mismatches, skipped_rows=grouping.skipped_rows)


def run_pipeline(
    source: TextInput | TableInput,
    config: PipelineConfig,
    store: MappingStore | None = None,
) -> PipelineResult:
    if isinstance(source, TextInput):
        return run_text_pipeline(source, config)
    return run_table_pipeline(source, config, store)
