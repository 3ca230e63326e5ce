from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..models.config_models import ColumnMapping, GroupingMode
from ..text.tokenizer import cell_text, extract_named_field

"""Grouping engine for uploaded rows.

Partitions Parsed Rows by part number (optionally plus invoice/BOE id),
applies the unit-quantity guard and extracts the serial/lot values of each
group. Only lines with quantity <= 1 correspond to individually serialized
items, everything else is left out of the sheet.
"""

__all__ = [
    "Group",
    "GroupingResult",
    "group_key",
    "parse_quantity",
    "group_rows",
]

KEY_SEPARATOR = " - "


@dataclass(frozen=True)
class Group:
    key: str
    values: list[str]  # retained identity values, input order
    row_count: int  # rows accumulated under this key before the quantity guard


@dataclass(frozen=True)
class GroupingResult:
    groups: list[Group] = field(default_factory=list)  # non-empty groups only, first-seen order
    skipped_rows: int = 0


def parse_quantity(value: Any) -> float | None:
    """Parse a quantity cell; blank or non-numeric -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return number


def _retainable(row: Mapping[str, Any], quantity_col: str) -> bool:
    qty = parse_quantity(row.get(quantity_col))
    return qty is not None and qty <= 1


def group_key(
    row: Mapping[str, Any],
    mapping: ColumnMapping,
    grouping: GroupingMode,
    default_key: str = "",
) -> str | None:
    """Compute the group key for a row, or None when the row must be skipped."""
    if mapping.serial is None or extract_named_field(row, mapping.serial) is None:
        return None
    if grouping is GroupingMode.NONE:
        return default_key
    if mapping.part is None:
        return None
    part = extract_named_field(row, mapping.part)
    if part is None:
        return None
    if grouping is GroupingMode.PART:
        return part
    if mapping.invoice is None:
        return None
    invoice = extract_named_field(row, mapping.invoice)
    if invoice is None:
        return None
    return f"{part}{KEY_SEPARATOR}{invoice}"


def group_rows(
    rows: Iterable[Mapping[str, Any]],
    mapping: ColumnMapping,
    grouping: GroupingMode,
    default_key: str = "",
) -> GroupingResult:
    """Partition rows into groups and extract the retained identity values.

    Raises:
        ValueError: if the mapping lacks a column the grouping mode needs
    """
    if not mapping.serial or not mapping.quantity:
        raise ValueError("serial and quantity columns are required")
    if grouping is not GroupingMode.NONE and not mapping.part:
        raise ValueError("part column is required for grouping")
    if grouping is GroupingMode.INVOICE and not mapping.invoice:
        raise ValueError("invoice column is required for invoice grouping")

    buckets: dict[str, list[Mapping[str, Any]]] = {}
    skipped = 0
    for row in rows:
        key = group_key(row, mapping, grouping, default_key)
        if key is None:
            skipped += 1
            continue
        buckets.setdefault(key, []).append(row)

    groups: list[Group] = []
    for key, members in buckets.items():
        values: list[str] = []
        for row in members:
            if not _retainable(row, mapping.quantity):
                skipped += 1
                continue
            value = cell_text(row.get(mapping.serial))
            if value:
                values.append(value)
        if values:
            groups.append(Group(key=key, values=values, row_count=len(members)))
    return GroupingResult(groups=groups, skipped_rows=skipped)
