from __future__ import annotations

from ..models.mismatch_record import MismatchRecord
from ..models.pipeline_result import PipelineResult

"""SUMMARY line and notification rendering.

Format of the SUMMARY line:
SUMMARY sheets={sheets} records={records} mismatches={mismatches} skipped_rows={skipped}
"""


def render_summary_line(result: PipelineResult, total_sheets: int | None = None) -> str:
    """Render a SUMMARY line for a finished run.

    Args:
        result: result of the run (or the merged results of a session)
        total_sheets: sheets in the collection after the run; defaults to the
            sheets produced by the run itself

    Examples:
        >>> from serial_sheets.models import Sheet
        >>> from serial_sheets.services.record_builder import build_records
        >>> from serial_sheets.models import IdentityMode
        >>> sheet = Sheet("P1 - I1", build_records(["SN001", "SN002"], IdentityMode.SERIAL))
        >>> render_summary_line(PipelineResult(sheets=[sheet], skipped_rows=1))
        'SUMMARY sheets=1 records=2 mismatches=0 skipped_rows=1'
    """
    sheets = len(result.sheets) if total_sheets is None else total_sheets
    return (
        f"SUMMARY sheets={sheets} "
        f"records={result.total_records} "
        f"mismatches={len(result.mismatches)} "
        f"skipped_rows={result.skipped_rows}"
    )


def render_validation_warning(mismatches: list[MismatchRecord]) -> str:
    """Multi-line warning listing every mismatch; "" when there are none."""
    if not mismatches:
        return ""
    details = "".join(f"\n- {m.describe()}" for m in mismatches)
    return (
        f"Validation Warning! {len(mismatches)} value(s) did not match the expected format. "
        f"Details: {details}"
    )


def merge_results(results: list[PipelineResult]) -> PipelineResult:
    """Combine the results of several runs of one session."""
    return PipelineResult(
        sheets=[s for r in results for s in r.sheets],
        mismatches=[m for r in results for m in r.mismatches],
        skipped_rows=sum(r.skipped_rows for r in results),
    )
