from __future__ import annotations

from dataclasses import dataclass, field

from .output_record import IdentityMode, OutputRecord

"""Sheet model: a named, ordered set of OutputRecords.

Sheets are produced by the pipeline and accumulated in the SheetCollection
until export. The 31-character workbook limit is applied only at export time,
the stored name is kept in full.
"""

__all__ = [
    "Sheet",
]


@dataclass(frozen=True)
class Sheet:
    name: str  # blank -> collection assigns "Sheet N"
    records: list[OutputRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def mode(self) -> IdentityMode:
        """Detect the build mode: lot when any record carries a lot number."""
        if any(r.lot_no != "" for r in self.records):
            return IdentityMode.LOT
        return IdentityMode.SERIAL

    @property
    def identity_values(self) -> list[str]:
        return [r.identity_value for r in self.records]

    def renamed(self, name: str) -> Sheet:
        return Sheet(name=name, records=self.records)
