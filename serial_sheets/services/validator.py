from __future__ import annotations

from collections.abc import Sequence

from ..models.config_models import DuplicatePolicy
from ..models.mismatch_record import MismatchReason, MismatchRecord

"""Sequence validator for the identity values of one group.

The first value of a group is the reference. Every later value must have the
same length and the same letter/digit shape ("AB12" -> "LLNN"). Duplicates
are handled according to DuplicatePolicy.
"""

__all__ = [
    "shape_of",
    "validate_values",
]

_DIGITS = frozenset("0123456789")


def shape_of(value: str) -> str:
    """Map each character to N (ASCII digit) or L (anything else)."""
    return "".join("N" if ch in _DIGITS else "L" for ch in value)


def validate_values(
    values: Sequence[str],
    group: str = "",
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.FLAG_AND_KEEP,
    validate: bool = True,
) -> tuple[list[str], list[MismatchRecord]]:
    """Validate a group's values against its first value.

    Returns:
        (values to keep, mismatches). Only DROP_SILENTLY ever removes a value.
    """
    kept: list[str] = []
    mismatches: list[MismatchRecord] = []
    seen: set[str] = set()
    check = validate and len(values) >= 2
    reference = values[0] if values else ""
    reference_shape = shape_of(reference)

    for index, value in enumerate(values):
        if value in seen:
            if duplicate_policy is DuplicatePolicy.DROP_SILENTLY:
                continue
            if check:
                mismatches.append(MismatchRecord(group, value, MismatchReason.DUPLICATE))
        seen.add(value)
        kept.append(value)

        if not check or index == 0:
            continue
        if len(value) != len(reference):
            mismatches.append(MismatchRecord(group, value, MismatchReason.LENGTH))
        elif shape_of(value) != reference_shape:
            mismatches.append(MismatchRecord(group, value, MismatchReason.SEQUENCE))

    return kept, mismatches
