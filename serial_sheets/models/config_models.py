from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .output_record import IdentityMode

"""Config dataclasses for the serial/lot sheet builder.

PipelineConfig carries the few options that select a pipeline variant
(identity mode, grouping, validation, duplicate policy). AppConfig is the
root object produced by config/loader.py from the YAML file.
"""


class GroupingMode(Enum):
    """How uploaded rows are partitioned into sheets.

    - NONE: every retained row goes to one sheet
    - PART: one sheet per part number
    - INVOICE: one sheet per "part - invoice" pair
    """
    NONE = "none"
    PART = "part"
    INVOICE = "invoice"


class DuplicatePolicy(Enum):
    """What happens to a value repeated inside a group."""
    FLAG_AND_KEEP = "flag-and-keep"
    DROP_SILENTLY = "drop-silently"


@dataclass(frozen=True)
class ColumnMapping:
    """Column-header selections for the upload path.

    Any field may be None until resolved against the file headers.
    """
    part: str | None = None
    invoice: str | None = None
    quantity: str | None = None
    serial: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Non-empty selections only, as persisted in the mapping store."""
        data = {
            "part": self.part,
            "invoice": self.invoice,
            "quantity": self.quantity,
            "serial": self.serial,
        }
        return {k: v for k, v in data.items() if v}

    @classmethod
    def from_dict(cls, data: dict[str, object] | None) -> ColumnMapping:
        if not data:
            return cls()
        def _str(key: str) -> str | None:
            value = data.get(key)
            return str(value) if value else None
        return cls(
            part=_str("part"),
            invoice=_str("invoice"),
            quantity=_str("quantity"),
            serial=_str("serial"),
        )


@dataclass(frozen=True)
class PipelineConfig:
    """Options for one pipeline run."""
    mode: IdentityMode = IdentityMode.SERIAL
    grouping: GroupingMode = GroupingMode.INVOICE
    validate: bool = True
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.FLAG_AND_KEEP


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object for the command-line front end."""
    output_path: str = "multi_sheet_output.xlsx"
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    has_header: bool = False  # manual paste: first line is a header
    column_index: int = 0  # manual paste: zero-based column to extract
    mapping_store: str = ".serial_sheets/mappings.json"
    mismatch_log_dir: str | None = "logs"  # None disables the JSON Lines log
