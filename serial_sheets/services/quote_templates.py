from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .clipboard import render_tsv

"""Price-quote reformatting templates.

Quote exports are pasted as a tab-separated table whose first line is the
header. Each template turns those rows into the column layout of a purchase
or pricing sheet, ready to paste back into a spreadsheet.

Prices are cleaned by removing currency symbols, thousands separators and
whitespace, then reading the leading number ("1,250.50 USD" -> 1250.5).
Unparseable numbers render as blank cells.
"""

__all__ = [
    "QuoteTemplate",
    "TEMPLATES",
    "parse_header_table",
    "clean_number",
    "parse_leading_int",
    "render_template",
]

QuoteRow = dict[str, str]

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")
_RUPEE_NOISE = re.compile(r"[,₹\s]")
_DOLLAR_NOISE = re.compile(r"[$,\s]")


def parse_header_table(text: str) -> list[QuoteRow]:
    """First line is the header; later lines map header -> trimmed value."""
    lines = [line.rstrip("\r") for line in text.strip().split("\n") if line.strip()]
    if not lines:
        return []
    headers = [h.strip() for h in lines[0].split("\t")]
    rows: list[QuoteRow] = []
    for line in lines[1:]:
        values = line.split("\t")
        rows.append({h: (values[i].strip() if i < len(values) else "") for i, h in enumerate(headers)})
    return rows


def clean_number(value: str | None, noise: re.Pattern[str] = _RUPEE_NOISE) -> float | None:
    if not value:
        return None
    match = _FLOAT_PREFIX.match(noise.sub("", value))
    return float(match.group(0)) if match else None


def parse_leading_int(value: str | None) -> int | None:
    if not value:
        return None
    match = _INT_PREFIX.match(value.strip())
    return int(match.group(0)) if match else None


def _fixed(num: float | None) -> str:
    return "" if num is None else f"{num:.2f}"


def _usd(num: float | None) -> str:
    return "" if num is None else f"$ {num:.2f}"


def _total(qty: int | None, unit: float | None) -> float | None:
    if qty is None or unit is None:
        return None
    return qty * unit


def _buy_price(row: QuoteRow) -> str:
    return row.get("Buy Price", "") or row.get("Quote Price", "")


def _margin(cost: float | None, sale: float | None) -> str:
    if cost is None or sale is None or cost == 0:
        return ""
    return f"{(sale - cost) / cost * 100:.2f}"


def _buy_price_row(row: QuoteRow) -> list[str]:
    cost = clean_number(_buy_price(row))
    sale = clean_number(row.get("Sell Price"))
    return [
        row.get("Req Qty", ""),
        row.get("SKU Code", ""),
        _fixed(cost),
        _fixed(cost * 1.05 if cost is not None else None),
        _fixed(sale),
        _margin(cost, sale),
        row.get("End User Name", ""),
        row.get("Vendor", ""),
        "",
    ]


def _po_lines_row(row: QuoteRow) -> list[str]:
    qty = parse_leading_int(row.get("Req Qty"))
    unit = clean_number(_buy_price(row))
    return [
        "", "", row.get("End User Name", ""), row.get("SKU Code", ""), "", "",
        "" if qty is None else str(qty),
        _fixed(unit),
        _fixed(_total(qty, unit)),
        "", "", row.get("Vendor", ""),
    ]


def _quote_row(row: QuoteRow) -> list[str]:
    qty = parse_leading_int(row.get("REQ QTY"))
    unit = clean_number(row.get("QUOTE PRICE"), _DOLLAR_NOISE)
    return [
        row.get("SKU CODE", ""),
        row.get("Main OEM Part No", ""),
        row.get("VARIANT CODE", ""),
        row.get("DESCRIPTION", ""),
        "" if qty is None else str(qty),
        _usd(unit),
        _usd(_total(qty, unit)),
        row.get("END USER NAME", ""),
    ]


def _purchase_row(row: QuoteRow) -> list[str]:
    qty = parse_leading_int(row.get("REQ QTY"))
    unit = clean_number(row.get("QUOTE PRICE"), _DOLLAR_NOISE)
    return [
        "", "",
        row.get("Status", ""),
        "Armortec",
        row.get("SKU CODE", ""),
        row.get("ITEM CODE", ""),
        row.get("VARIANT CODE", ""),
        row.get("DESCRIPTION", ""),
        "" if qty is None else str(qty),
        _fixed(unit),
        _fixed(_total(qty, unit)),
        row.get("END USER NAME", ""),
    ]


@dataclass(frozen=True)
class QuoteTemplate:
    name: str
    headers: tuple[str, ...]
    build_row: Callable[[QuoteRow], list[str]]


TEMPLATES: dict[str, QuoteTemplate] = {
    t.name: t
    for t in (
        QuoteTemplate(
            "buy-price",
            ("Qty", "Item", "Mustek Buy Price", "Quinta 5%", "End Price", "Margin",
             "Customer", "Vendor", "PO #"),
            _buy_price_row,
        ),
        QuoteTemplate(
            "po-lines",
            ("PO No", "PO dt", "Customer", "Part number", "Variant/Brand", "Product type",
             "Qty", "U/P", "Total", "ETD", "BU", "Supplier"),
            _po_lines_row,
        ),
        QuoteTemplate(
            "quote",
            ("SKU CODE", "OEM PART NO", "Variant", "DESCRIPTION",
             "REQ QTY", "QUOTE PRICE $", "Total $", "PURPOSE"),
            _quote_row,
        ),
        QuoteTemplate(
            "purchase",
            ("PO#", "PO date", "Status", "Supplier", "Item", "Item Code",
             "Variant", "Description", "Qty", "U/P", "Total", "Purpose"),
            _purchase_row,
        ),
    )
}


def render_template(name: str, text: str) -> str:
    """Render pasted quote text through a named template as TSV.

    Raises:
        KeyError: unknown template name
    """
    template = TEMPLATES[name]
    rows = [template.build_row(r) for r in parse_header_table(text)]
    return render_tsv(template.headers, rows)
