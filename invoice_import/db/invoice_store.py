from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

from ..models.client import Client, ClientDirectory
from ..models.invoice import AssembledInvoice

"""Invoice persistence (PostgreSQL).

Assembled invoices are stored as one `invoices` row plus one `invoice_items`
row per line item, batched with psycopg2.extras.execute_values. Transaction
boundaries (BEGIN / COMMIT / ROLLBACK) belong to the caller.

Tables (created outside this tool):
    invoices(id, invoice_number UNIQUE, invoice_date, original_invoice_date,
             location_group, client_id, client_name, subtotal, grand_total, status)
    invoice_items(id, invoice_id, company, job_key, reference_number, job_title,
                  location, quantity, unit, average_cost, total)
    clients(id, name, business, locations)
"""

__all__ = [
    "InvoiceStoreError",
    "SaveResult",
    "INVOICE_COLUMNS",
    "ITEM_COLUMNS",
    "invoice_records",
    "save_invoices",
    "load_client_directory",
]

INVOICE_COLUMNS: tuple[str, ...] = (
    "id",
    "invoice_number",
    "invoice_date",
    "original_invoice_date",
    "location_group",
    "client_id",
    "client_name",
    "subtotal",
    "grand_total",
    "status",
)
ITEM_COLUMNS: tuple[str, ...] = (
    "id",
    "invoice_id",
    "company",
    "job_key",
    "reference_number",
    "job_title",
    "location",
    "quantity",
    "unit",
    "average_cost",
    "total",
)


class InvoiceStoreError(Exception):
    pass


@dataclass(frozen=True)
class SaveResult:
    invoices: int
    items: int


def _numeric_or_none(value: Any) -> Any:
    """REAL/INTEGER columns get None for empty or non-numeric source text."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def invoice_records(
    invoices: Iterable[AssembledInvoice],
    id_factory: Any = None,
) -> tuple[list[tuple[Any, ...]], list[tuple[Any, ...]]]:
    """Build (invoice rows, item rows) tuples in column order."""
    make_id = id_factory or (lambda: str(uuid.uuid4()))
    invoice_rows: list[tuple[Any, ...]] = []
    item_rows: list[tuple[Any, ...]] = []
    for invoice in invoices:
        invoice_id = make_id()
        first = invoice.items[0] if invoice.items else None
        invoice_rows.append((
            invoice_id,
            invoice.new_invoice_number,
            invoice.invoice_date,
            first.original_invoice_date if first else "",
            invoice.business.key,
            (first.client_id or None) if first else None,
            invoice.client_name,
            invoice.subtotal,
            invoice.grand_total,
            "pending",
        ))
        for item in invoice.items:
            quantity = item.quantity if isinstance(item.quantity, int) else None
            item_rows.append((
                make_id(),
                invoice_id,
                item.company,
                item.job_key,
                item.reference_number,
                item.job_title,
                item.location,
                quantity,
                item.unit,
                _numeric_or_none(item.average_cost),
                _numeric_or_none(item.total),
            ))
    return invoice_rows, item_rows


def _insert(cursor: Any, table: str, columns: Sequence[str], rows: list[tuple[Any, ...]], page_size: int) -> int:
    if not rows:
        return 0
    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    try:
        execute_values(cursor, sql, rows, page_size=page_size)
    except Exception as e:
        raise InvoiceStoreError(f"insert into {table} failed: {e}") from e
    return len(rows)


def save_invoices(cursor: Any, invoices: Iterable[AssembledInvoice], page_size: int = 1000) -> SaveResult:
    """Insert invoices and their items; the caller commits or rolls back."""
    invoice_rows, item_rows = invoice_records(invoices)
    saved_invoices = _insert(cursor, "invoices", INVOICE_COLUMNS, invoice_rows, page_size)
    saved_items = _insert(cursor, "invoice_items", ITEM_COLUMNS, item_rows, page_size)
    return SaveResult(invoices=saved_invoices, items=saved_items)


def load_client_directory(cursor: Any) -> ClientDirectory:
    """Read the `clients` table into a ClientDirectory keyed by business."""
    try:
        cursor.execute("SELECT id, name, business, locations FROM clients ORDER BY id")
        rows = cursor.fetchall()
    except Exception as e:
        raise InvoiceStoreError(f"failed loading clients: {e}") from e

    directory: ClientDirectory = {}
    for client_id, name, business, locations in rows:
        key = (business or "").strip().lower()
        directory.setdefault(key, []).append(
            Client(id=str(client_id), name=name or "", business=key, locations=locations or "")
        )
    return directory
