from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.mismatch_record import MismatchRecord

"""Mismatch log buffering.

- JSON Lines, fixed key set (timestamp, group, value, reason)
- one file per run: `<dir>/mismatches-YYYYMMDD-HHMMSS.log` (UTC)
- records are buffered and written on flush(); nothing is created for a run
  without mismatches
"""

__all__ = [
    "MismatchLogBuffer",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class MismatchLogBuffer:
    """In-memory buffer of mismatch records. Flush appends JSON Lines."""

    def __init__(self, logs_dir: Path = Path("./logs")) -> None:
        self.logs_dir = logs_dir
        self._records: list[MismatchRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.logs_dir / f"mismatches-{stamp}.log"
        return self._file_path

    def extend(self, records: list[MismatchRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, or None if empty."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
