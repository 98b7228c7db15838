from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

"""Header metadata extraction.

The export starts with free-text lines before the CSV table. Line 1 carries
"invoice #<ID>" and a later line carries "Itemization details <date range>".
Missing metadata is not an error: the field is returned as an empty string.
"""

__all__ = [
    "InvoiceInfo",
    "extract_invoice_info",
]

# Whole pattern is case-insensitive: "invoice #usi25-00123abc" keeps its lower-case token
_INVOICE_NUMBER_RE = re.compile(r"invoice #([A-Z0-9-]+)", re.IGNORECASE)
_ITEMIZATION_MARKER = "Itemization details"
_INVOICE_DATE_RE = re.compile(r"Itemization details\s+(.+)")


@dataclass(frozen=True)
class InvoiceInfo:
    invoice_number: str = ""
    invoice_date: str = ""

    @property
    def missing_fields(self) -> list[str]:
        missing = []
        if not self.invoice_number:
            missing.append("invoice_number")
        if not self.invoice_date:
            missing.append("invoice_date")
        return missing


def extract_invoice_info(lines: Sequence[str]) -> InvoiceInfo:
    """Recover invoice number and date from the decorative header lines.

    Only the first line is searched for the invoice number. Scanning for the
    date stops at the first line containing the marker, even when nothing
    usable follows it.
    """
    invoice_number = ""
    if lines:
        match = _INVOICE_NUMBER_RE.search(lines[0])
        if match:
            invoice_number = match.group(1)

    invoice_date = ""
    for line in lines:
        if _ITEMIZATION_MARKER in line:
            match = _INVOICE_DATE_RE.search(line)
            if match:
                invoice_date = match.group(1).strip().replace('"', "")
            break

    return InvoiceInfo(invoice_number=invoice_number, invoice_date=invoice_date)
