from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from ..models.business import Business
from ..models.invoice import AssembledInvoice, SummaryRow
from ..models.line_item import LineItem
from .assembler import invoice_rows

"""Grouped CSV export.

One `<Business>_invoices.csv` per business holding every assembled invoice
of the batch: line items followed by the SUBTOTAL / GRAND TOTAL trailer rows.
"""

__all__ = [
    "EXPORT_COLUMNS",
    "export_frame",
    "write_grouped_files",
]

logger = logging.getLogger(__name__)

# Output header -> LineItem attribute
EXPORT_COLUMNS: dict[str, str] = {
    "Invoice Number": "new_invoice_number",
    "Original Invoice Number": "invoice_number",
    "Invoice Date": "invoice_date",
    "Client": "client_name",
    "Company": "company",
    "Job Key": "job_key",
    "Reference Number": "reference_number",
    "Job Title": "job_title",
    "Location": "location",
    "Quantity": "quantity",
    "Unit": "unit",
    "Average Cost": "average_cost",
    "Total": "total",
}


def _row_values(row: LineItem | SummaryRow) -> dict[str, object]:
    if isinstance(row, SummaryRow):
        return {header: (row.total if attr == "total" else "") for header, attr in EXPORT_COLUMNS.items()}
    return {header: getattr(row, attr) for header, attr in EXPORT_COLUMNS.items()}


def export_frame(invoices: Iterable[AssembledInvoice]) -> pd.DataFrame:
    records = [_row_values(row) for invoice in invoices for row in invoice_rows(invoice)]
    return pd.DataFrame(records, columns=list(EXPORT_COLUMNS), dtype=object)


def write_grouped_files(invoices: Iterable[AssembledInvoice], output_dir: Path) -> list[Path]:
    """Write one CSV per business that has invoices; returns the written paths."""
    by_business: dict[Business, list[AssembledInvoice]] = {b: [] for b in Business}
    for invoice in invoices:
        by_business[invoice.business].append(invoice)

    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for business, group in by_business.items():
        if not group:
            logger.info(f"No records found for {business.display_name} group - skipping file creation")
            continue
        frame = export_frame(group)
        path = output_dir / f"{business.display_name}_invoices.csv"
        frame.to_csv(path, index=False, encoding="utf-8")
        logger.info(f"Created {path} with {len(frame)} records (including summary rows)")
        written.append(path)
    return written
