from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, build_config, load_config
from ..config.mapping_store import JsonFileMappingStore
from ..excel.reader import UploadReadError, list_sheet_names
from ..excel.writer import WorkbookWriteError, write_workbook
from ..logging.init import log_summary, setup_logging
from ..logging.mismatch_log import MismatchLogBuffer
from ..models.config_models import AppConfig, ColumnMapping, DuplicatePolicy, GroupingMode, PipelineConfig
from ..models.output_record import IdentityMode
from ..models.pipeline_result import PipelineResult
from ..services.clipboard import sheet_to_clipboard_text
from ..services.pipeline import PipelineError, TableInput, TextInput, load_table, run_pipeline
from ..services.quote_templates import TEMPLATES, render_template
from ..services.sheet_collection import SheetCollection
from ..services.summary import merge_results, render_summary_line, render_validation_warning

"""CLI entrypoint.

Subcommands:
- paste   : pasted text (files or stdin) -> one sheet per input -> workbook
- upload  : spreadsheet/CSV upload -> one sheet per group -> workbook
- inspect : print headers and first rows of an upload
- quote   : reformat a pasted price-quote table through a template

Exit codes: 0 success, 1 fatal (config/input/parse/mapping/write),
2 workbook written but validation warnings were raised.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_WARNINGS = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so SERIAL_SHEETS_* overrides are visible to the config loader."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="serial-sheets", description="Serial/lot number multi-sheet workbook builder")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    build = argparse.ArgumentParser(add_help=False)
    build.add_argument("--output", "-o", type=Path, default=None, help="Output workbook path")
    build.add_argument("--lot", action="store_true", help="Fill 'Lot No.' instead of 'Serial No.'")
    build.add_argument(
        "--duplicates",
        choices=[d.value for d in DuplicatePolicy],
        default=None,
        help="Duplicate value policy",
    )
    build.add_argument("--no-validate", action="store_true", help="Skip length/sequence validation")
    build.add_argument("--print-tsv", action="store_true", help="Print each sheet as tab-separated text")

    paste = sub.add_parser("paste", parents=[build], help="Build sheets from pasted text")
    paste.add_argument("files", nargs="*", type=Path, help="Text files (stdin when omitted)")
    paste.add_argument("--column", type=int, default=None, help="Zero-based column index")
    paste.add_argument("--header", action="store_true", default=None, help="First line is a header")
    paste.add_argument("--name", default="", help="Sheet name (default: 'Sheet N')")

    upload = sub.add_parser("upload", parents=[build], help="Build sheets from an uploaded file")
    upload.add_argument("file", type=Path)
    upload.add_argument("--sheet", default=None, help="Workbook sheet to read (default: first)")
    upload.add_argument("--list-sheets", action="store_true", help="List workbook sheets and exit")
    upload.add_argument("--grouping", choices=[g.value for g in GroupingMode], default=None)
    upload.add_argument("--part", default=None, help="Part number column header")
    upload.add_argument("--invoice", default=None, help="Invoice/BOE column header")
    upload.add_argument("--qty", default=None, help="Quantity column header")
    upload.add_argument("--serial", default=None, help="Serial/lot number column header")

    inspect = sub.add_parser("inspect", help="Print headers and first rows of a file")
    inspect.add_argument("file", type=Path)
    inspect.add_argument("--sheet", default=None)
    inspect.add_argument("--rows", type=int, default=3)

    quote = sub.add_parser("quote", help="Reformat a pasted quote table")
    quote.add_argument("file", nargs="?", type=Path, default=None, help="Text file (stdin when omitted)")
    quote.add_argument("--template", choices=sorted(TEMPLATES), required=True)
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    if args.config is not None:
        return load_config(args.config)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return build_config({})


def _pipeline_config(cfg: AppConfig, args: argparse.Namespace) -> PipelineConfig:
    pipeline = cfg.pipeline
    if args.lot:
        pipeline = replace(pipeline, mode=IdentityMode.LOT)
    if args.duplicates:
        pipeline = replace(pipeline, duplicate_policy=DuplicatePolicy(args.duplicates))
    if args.no_validate:
        pipeline = replace(pipeline, validate=False)
    if getattr(args, "grouping", None):
        pipeline = replace(pipeline, grouping=GroupingMode(args.grouping))
    return pipeline


def _read_text(path: Path | None) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8-sig")


def _run_paste(cfg: AppConfig, args: argparse.Namespace, collection: SheetCollection) -> list[PipelineResult]:
    pipeline = _pipeline_config(cfg, args)
    column = cfg.column_index if args.column is None else args.column
    has_header = cfg.has_header if args.header is None else args.header
    results: list[PipelineResult] = []
    for path in args.files or [None]:
        source = TextInput(
            text=_read_text(path),
            column_index=column,
            has_header=has_header,
            sheet_name=args.name,
        )
        result = run_pipeline(source, pipeline)
        stored = collection.extend(result.sheets)
        results.append(replace(result, sheets=stored))
    return results


def _run_upload(cfg: AppConfig, args: argparse.Namespace, collection: SheetCollection) -> list[PipelineResult]:
    pipeline = _pipeline_config(cfg, args)
    table = load_table(args.file, args.sheet)
    explicit = ColumnMapping(part=args.part, invoice=args.invoice, quantity=args.qty, serial=args.serial)
    store = JsonFileMappingStore(Path(cfg.mapping_store))
    result = run_pipeline(TableInput(table=table, mapping=explicit), pipeline, store)
    stored = collection.extend(result.sheets)
    return [replace(result, sheets=stored)]


def _inspect_file(args: argparse.Namespace) -> int:
    table = load_table(args.file, args.sheet)
    print(f"SHEET: {table.sheet_name} cols={table.headers}")
    for row in table.rows[: max(args.rows, 0)]:
        safe = {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in row.items()}
        print("    sample_row=", safe)
    return EXIT_SUCCESS


def _export(cfg: AppConfig, args: argparse.Namespace, collection: SheetCollection, results: list[PipelineResult]) -> int:
    logger = setup_logging()
    merged = merge_results(results)

    if merged.has_warnings:
        logger.warning(render_validation_warning(merged.mismatches))
        if cfg.mismatch_log_dir:
            buffer = MismatchLogBuffer(Path(cfg.mismatch_log_dir))
            buffer.extend(merged.mismatches)
            try:
                log_path = buffer.flush()
                logger.info(f"mismatch log: {log_path}")
            except OSError as e:
                logger.warning(f"could not write mismatch log: {e}")

    if args.print_tsv:
        for sheet in collection:
            if sheet.records:
                print(f"# {sheet.name}")
                print(sheet_to_clipboard_text(sheet))

    output = args.output or Path(cfg.output_path)
    try:
        written = write_workbook(collection.export_tables(), output)
    except (PipelineError, WorkbookWriteError) as e:
        logger.error(f"export: {e}")
        return EXIT_FATAL
    logger.info(f"Excel file with summary has been exported: {written}")

    summary_line = render_summary_line(merged, total_sheets=len(collection))
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_WARNINGS if merged.has_warnings else EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None -> read sys.argv; an explicit [] must not pick up pytest's own arguments
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        setup_logging(debug=True)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    collection = SheetCollection()
    try:
        if args.command == "inspect":
            return _inspect_file(args)
        if args.command == "quote":
            print(render_template(args.template, _read_text(args.file)))
            return EXIT_SUCCESS
        if args.command == "upload" and args.list_sheets:
            try:
                for name in list_sheet_names(args.file):
                    print(name)
            except UploadReadError as e:
                logger.error(f"upload: {e}")
                return EXIT_FATAL
            return EXIT_SUCCESS
        if args.command == "paste":
            results = _run_paste(cfg, args, collection)
        else:
            results = _run_upload(cfg, args, collection)
    except PipelineError as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL
    except OSError as e:
        logger.error(f"{args.command}: cannot read input: {e}")
        return EXIT_FATAL

    return _export(cfg, args, collection, results)
