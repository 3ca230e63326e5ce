from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""OutputRecord model for the serial/lot sheet builder.

One OutputRecord is one exported row: a serial or lot number plus the
constant companion columns the item-tracking import expects. The column
order of OUTPUT_HEADERS is the column order of every exported data sheet.
"""

__all__ = [
    "IdentityMode",
    "OutputRecord",
    "OUTPUT_HEADERS",
]


class IdentityMode(Enum):
    """Which identity column a build fills (chosen per build, not per record)."""
    SERIAL = "serial"
    LOT = "lot"


OUTPUT_HEADERS: tuple[str, ...] = (
    "Availability, Serial No.",
    "Serial No.",
    "Availability, Lot No.",
    "Lot No.",
    "Availability, Package No.",
    "Package No.",
    "Quantity (Base)",
    "Qty. to Handle (Base)",
    "Appl.-to Item Entry",
    "License key",
    "Bin Code",
)


@dataclass(frozen=True)
class OutputRecord:
    """Fixed eleven-column export row.

    At most one of serial_no / lot_no is non-empty.
    """
    serial_no: str = ""
    lot_no: str = ""
    serial_available: str = "Yes"
    lot_available: str = "Yes"
    package_available: str = "Yes"
    package_no: str = ""
    quantity_base: int = 1
    qty_to_handle_base: int = 1
    appl_to_item_entry: int = 0
    license_key: str = ""
    bin_code: str = ""

    @property
    def identity_value(self) -> str:
        return self.lot_no or self.serial_no

    def to_row(self) -> dict[str, Any]:
        """Return the record keyed by export header, in OUTPUT_HEADERS order."""
        return {
            "Availability, Serial No.": self.serial_available,
            "Serial No.": self.serial_no,
            "Availability, Lot No.": self.lot_available,
            "Lot No.": self.lot_no,
            "Availability, Package No.": self.package_available,
            "Package No.": self.package_no,
            "Quantity (Base)": self.quantity_base,
            "Qty. to Handle (Base)": self.qty_to_handle_base,
            "Appl.-to Item Entry": self.appl_to_item_entry,
            "License key": self.license_key,
            "Bin Code": self.bin_code,
        }
