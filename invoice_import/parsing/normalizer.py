from __future__ import annotations

import math
import re
from dataclasses import replace
from typing import Any

from ..models.line_item import LINE_ITEM_FIELDS, LineItem, RawRow

"""Field normalizer.

Maps the export's column names (pretty "Job Key" headers, occasionally
snake_case "job_key") onto the canonical LineItem fields, then reformats the
numeric columns. Pure functions; absent fields silently default to "".
"""

__all__ = [
    "FIELD_SOURCES",
    "normalize_row",
    "format_numeric_values",
    "to_line_item",
]

# Canonical field -> source headers checked in order (first non-empty wins)
FIELD_SOURCES: dict[str, tuple[str, str]] = {
    "company": ("Company", "company"),
    "job_key": ("Job Key", "job_key"),
    "reference_number": ("Reference Number", "reference_number"),
    "job_title": ("Job Title", "job_title"),
    "location": ("Location", "location"),
    "quantity": ("Quantity", "quantity"),
    "unit": ("Unit", "unit"),
    "average_cost": ("Average Cost", "average_cost"),
    "total": ("Total", "total"),
    "currency": ("Currency", "currency"),
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def normalize_row(raw: RawRow) -> dict[str, Any]:
    record: dict[str, Any] = {}
    for field_name in LINE_ITEM_FIELDS:
        pretty, snake = FIELD_SOURCES[field_name]
        value: Any = ""
        for key in (pretty, snake):
            candidate = raw.get(key)
            if candidate not in (None, ""):
                value = candidate
                break
        record[field_name] = value
    return record


def _as_number(value: Any) -> float | None:
    """Float value of a non-empty numeric field, None otherwise."""
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
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _truncate_int(value: Any) -> int | None:
    """Base-10 integer prefix of a numeric value ("2.9" -> 2, "-3" -> -3)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    match = _LEADING_INT_RE.match(str(value))
    if match is None:
        # numeric but without an integer prefix, e.g. ".5"
        return 0
    return int(match.group(1), 10)


def format_numeric_values(record: dict[str, Any]) -> dict[str, Any]:
    """Two-decimal `total` / `average_cost`, truncated integer `quantity`.

    Empty and non-numeric values are left untouched (never coerced to zero).
    Returns a new dict.
    """
    formatted = dict(record)
    for money_field in ("total", "average_cost"):
        number = _as_number(formatted.get(money_field))
        if number is not None:
            formatted[money_field] = f"{number:.2f}"

    if _as_number(formatted.get("quantity")) is not None:
        formatted["quantity"] = _truncate_int(formatted["quantity"])
    return formatted


def to_line_item(raw: RawRow, invoice_number: str = "", invoice_date: str = "") -> LineItem | None:
    """Normalize one parsed row into a LineItem carrying the header metadata.

    Returns None for rows that are not billable (missing reference number
    or job title after normalization).
    """
    record = format_numeric_values(normalize_row(raw))
    item = LineItem(**record)
    if not item.is_billable:
        return None
    return replace(
        item,
        invoice_number=invoice_number,
        invoice_date=invoice_date,
        original_invoice_date=invoice_date,
    )
