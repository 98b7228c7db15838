from __future__ import annotations

from dataclasses import dataclass

from .business import Business

"""LineItem model for the CSV invoice importer.

A LineItem is one billable row of an itemized export after normalization.
It starts out with the source fields and invoice metadata and is enriched
(business, client identity, synthesized invoice number) by building new
instances with `dataclasses.replace`; instances are never mutated.
"""

__all__ = [
    "RawRow",
    "LineItem",
    "LINE_ITEM_FIELDS",
]

# Source column name -> string value, exactly as parsed from the export
RawRow = dict[str, str]

# Canonical source fields (order used by exports)
LINE_ITEM_FIELDS: tuple[str, ...] = (
    "company",
    "job_key",
    "reference_number",
    "job_title",
    "location",
    "quantity",
    "unit",
    "average_cost",
    "total",
    "currency",
)


@dataclass(frozen=True)
class LineItem:
    """One normalized, classified and client-resolved billable row.

    Numeric fields keep the source text when it is empty or non-numeric:
    `quantity` becomes an int, `average_cost` / `total` become two-decimal
    strings only when the source parses as a number.
    """
    company: str = ""
    job_key: str = ""
    reference_number: str = ""
    job_title: str = ""
    location: str = ""
    quantity: int | str = ""
    unit: str = ""
    average_cost: str = ""
    total: str = ""
    currency: str = ""
    # Invoice metadata from the export header
    invoice_number: str = ""
    invoice_date: str = ""
    original_invoice_date: str = ""  # preserved through merges
    # Classification / client resolution
    business: Business = Business.OTHERS
    client_name: str = ""
    client_code: str = ""
    client_id: str = ""
    last_name: str = ""
    new_invoice_number: str = ""

    @property
    def is_billable(self) -> bool:
        """Real billable rows carry both a reference number and a job title."""
        return bool(self.reference_number) and bool(self.job_title)

    @property
    def client_key(self) -> str:
        """Key of the client bucket: directory id, or the code for fallback clients."""
        return self.client_id or self.client_code

    def total_amount(self) -> float:
        """Numeric value of `total`; non-numeric or empty totals count as 0."""
        try:
            value = float(self.total)
        except (TypeError, ValueError):
            return 0.0
        if value != value or value in (float("inf"), float("-inf")):
            return 0.0
        return value
