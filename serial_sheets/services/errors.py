from __future__ import annotations

"""User-facing error taxonomy of a pipeline run.

All of these are recovered at the boundary of the run that raised them; the
sheet collection is never mutated by a failed run.
"""

__all__ = [
    "PipelineError",
    "EmptyInputError",
    "ParseError",
    "MappingError",
]


class PipelineError(Exception):
    """Base exception for pipeline errors."""


class EmptyInputError(PipelineError):
    """No usable input: blank text, no values, or no column selections."""


class ParseError(PipelineError):
    """Uploaded file could not be decoded into a header plus data rows."""


class MappingError(PipelineError):
    """Selected column headers are not present in the current file."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"columns not found in file: {', '.join(self.missing)}")
