from __future__ import annotations

from collections.abc import Iterable

from ..models.output_record import IdentityMode, OutputRecord

"""Record builder: identity value -> fixed-shape OutputRecord."""


def build_record(value: str, mode: IdentityMode) -> OutputRecord:
    if mode is IdentityMode.LOT:
        return OutputRecord(serial_no="", lot_no=value)
    return OutputRecord(serial_no=value, lot_no="")


def build_records(values: Iterable[str], mode: IdentityMode) -> list[OutputRecord]:
    return [build_record(v, mode) for v in values]
