"""Domain models for the serial/lot sheet builder.

This package contains the dataclasses shared by the text tokenizer, the
grouping and validation services, the sheet collection and the workbook
writer.
"""

from .config_models import AppConfig, ColumnMapping, DuplicatePolicy, GroupingMode, PipelineConfig
from .mismatch_record import MismatchReason, MismatchRecord
from .output_record import OUTPUT_HEADERS, IdentityMode, OutputRecord
from .pipeline_result import PipelineResult
from .sheet import Sheet

__all__ = [
    # Configuration models
    "AppConfig",
    "ColumnMapping",
    "DuplicatePolicy",
    "GroupingMode",
    "PipelineConfig",
    # Processing models
    "IdentityMode",
    "MismatchReason",
    "MismatchRecord",
    "OUTPUT_HEADERS",
    "OutputRecord",
    "PipelineResult",
    "Sheet",
]
