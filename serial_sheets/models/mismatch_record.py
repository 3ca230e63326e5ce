from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

"""MismatchRecord model for validation diagnostics.

A MismatchRecord reports one identity value inside a group that does not look
like the group's reference value, or that repeats an earlier value. Records
are diagnostic only: they never remove a value from the output sheet.

The JSON Lines form has a fixed key set (timestamp, group, value, reason) so
that the mismatch log can be consumed by other tooling.
"""

__all__ = [
    "MismatchReason",
    "MismatchRecord",
]


class MismatchReason(Enum):
    """Why a value was flagged.

    - LENGTH: different character count than the reference value
    - SEQUENCE: same length, different letter/digit shape
    - DUPLICATE: value already seen in the same group
    """
    LENGTH = "Length Mismatch"
    SEQUENCE = "Sequence Mismatch"
    DUPLICATE = "Duplicate"


@dataclass(frozen=True)
class MismatchRecord:
    group: str  # group key or sheet name ("" for an unnamed manual sheet)
    value: str
    reason: MismatchReason

    def describe(self) -> str:
        """Human readable one-liner used in warning notifications."""
        if self.group:
            return f'Group [{self.group}]: Value "{self.value}" ({self.reason.value})'
        return f'"{self.value}" ({self.reason.value})'

    def to_json_line(self) -> str:
        """Serialize to a JSON Lines entry stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        payload = {
            "timestamp": ts,
            "group": self.group,
            "value": self.value,
            "reason": self.reason.value,
        }
        return json.dumps(payload, ensure_ascii=False)
