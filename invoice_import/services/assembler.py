from __future__ import annotations

from collections.abc import Iterable

from ..models.business import Business
from ..models.invoice import MARKUP_RATE, AssembledInvoice, SummaryRow
from ..models.line_item import LineItem

"""Invoice assembler.

Groups resolved line items by their synthesized invoice number (stable, in
order of first appearance), computes subtotal and the marked-up grand total,
and renders the trailer rows used by exports.
"""

__all__ = [
    "assemble_invoices",
    "summary_rows",
    "invoice_rows",
]


def assemble_invoices(
    items: Iterable[LineItem],
    business: Business | None = None,
    client_key: str | None = None,
) -> list[AssembledInvoice]:
    """Build one AssembledInvoice per distinct `new_invoice_number`.

    Args:
        items: resolved line items of one batch (one client bucket, usually)
        business: bucket business; defaults to the first item's business
        client_key: bucket client key; defaults to the first item's client key

    Returns:
        Invoices in order of first appearance, items in original order
    """
    groups: dict[str, list[LineItem]] = {}
    for item in items:
        groups.setdefault(item.new_invoice_number, []).append(item)

    invoices: list[AssembledInvoice] = []
    for invoice_number, group in groups.items():
        subtotal = round(sum(item.total_amount() for item in group), 2)
        invoices.append(
            AssembledInvoice(
                new_invoice_number=invoice_number,
                business=business if business is not None else group[0].business,
                client_key=client_key if client_key is not None else group[0].client_key,
                items=tuple(group),
                subtotal=subtotal,
                grand_total=round(subtotal * MARKUP_RATE, 2),
            )
        )
    return invoices


def summary_rows(invoice: AssembledInvoice) -> list[SummaryRow]:
    """Subtotal label/amount, grand total label/amount, blank separator."""
    number = invoice.new_invoice_number
    return [
        SummaryRow(total=f"SUBTOTAL - Invoice {number}"),
        SummaryRow(total=f"{invoice.subtotal:.2f}"),
        SummaryRow(total=f"GRAND TOTAL + 10% - Invoice {number}"),
        SummaryRow(total=f"{invoice.grand_total:.2f}"),
        SummaryRow(),
    ]


def invoice_rows(invoice: AssembledInvoice) -> list[LineItem | SummaryRow]:
    return [*invoice.items, *summary_rows(invoice)]
