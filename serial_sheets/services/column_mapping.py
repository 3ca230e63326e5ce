from __future__ import annotations

import logging
from dataclasses import replace

from ..config.mapping_store import COLUMN_MAPPING_KEY, MappingStore
from ..models.config_models import ColumnMapping, GroupingMode
from .errors import EmptyInputError, MappingError

"""Column mapping resolution for uploaded tables.

Selections are layered, later layers winning:
1. auto-detected headers ("part number", then "invoice" or "boe")
2. the saved mapping, only for headers present in the current file
3. explicit selections from the caller, which must exist in the file
"""

logger = logging.getLogger(__name__)

_FIELDS = ("part", "invoice", "quantity", "serial")


def _find_header(headers: list[str], needle: str) -> str | None:
    for h in headers:
        if needle in h.lower():
            return h
    return None


def detect_columns(headers: list[str]) -> ColumnMapping:
    """Guess part and invoice columns from common header names."""
    invoice = _find_header(headers, "invoice") or _find_header(headers, "boe")
    return ColumnMapping(part=_find_header(headers, "part number"), invoice=invoice)


def required_fields(grouping: GroupingMode) -> tuple[str, ...]:
    if grouping is GroupingMode.INVOICE:
        return ("part", "invoice", "quantity", "serial")
    if grouping is GroupingMode.PART:
        return ("part", "quantity", "serial")
    return ("quantity", "serial")


def resolve_mapping(
    headers: list[str],
    grouping: GroupingMode,
    explicit: ColumnMapping | None = None,
    store: MappingStore | None = None,
) -> ColumnMapping:
    """Resolve the column mapping for a file.

    Raises:
        MappingError: explicit selections missing from the file headers
        EmptyInputError: a column required by the grouping mode is unselected
    """
    header_set = set(headers)
    mapping = detect_columns(headers)

    if store is not None:
        saved = ColumnMapping.from_dict(store.load(COLUMN_MAPPING_KEY))
        applied = {f: getattr(saved, f) for f in _FIELDS if getattr(saved, f) in header_set}
        if applied:
            logger.debug(f"reapplying saved column mapping: {applied}")
            mapping = replace(mapping, **applied)

    if explicit is not None:
        chosen = {f: getattr(explicit, f) for f in _FIELDS if getattr(explicit, f)}
        missing = [v for v in chosen.values() if v not in header_set]
        if missing:
            raise MappingError(missing)
        mapping = replace(mapping, **chosen)

    unselected = [f for f in required_fields(grouping) if not getattr(mapping, f)]
    if unselected:
        raise EmptyInputError(
            f"please select all required columns for grouping '{grouping.value}': missing {', '.join(unselected)}"
        )
    return mapping


def remember_mapping(mapping: ColumnMapping, store: MappingStore | None) -> None:
    if store is not None:
        store.save(COLUMN_MAPPING_KEY, mapping.to_dict())
