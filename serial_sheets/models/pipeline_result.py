from __future__ import annotations

from dataclasses import dataclass, field

from .mismatch_record import MismatchRecord
from .sheet import Sheet

"""Result model for a single pipeline run.

Holds the candidate sheets (not yet in any collection) and the validation
diagnostics. Used by the SUMMARY line renderer and the CLI exit code logic.
"""


@dataclass(frozen=True)
class PipelineResult:
    sheets: list[Sheet] = field(default_factory=list)
    mismatches: list[MismatchRecord] = field(default_factory=list)
    skipped_rows: int = 0  # rows dropped for blank keys or the quantity guard

    @property
    def total_records(self) -> int:
        return sum(len(s) for s in self.sheets)

    @property
    def has_warnings(self) -> bool:
        return bool(self.mismatches)
