from __future__ import annotations

from dataclasses import dataclass

from .business import Business
from .line_item import LineItem

"""Assembled invoice and summary row models.

Phase: invoice assembly
An AssembledInvoice groups the line items of one batch that share a
synthesized invoice number. SummaryRow is a presentation artifact appended
after each invoice's items in exports; it is not a LineItem.
"""

__all__ = [
    "MARKUP_RATE",
    "AssembledInvoice",
    "SummaryRow",
]

# Fixed billing fee applied on top of the subtotal (not configurable)
MARKUP_RATE = 1.10


@dataclass(frozen=True)
class AssembledInvoice:
    """Billing unit keyed by `new_invoice_number`.

    Invariant: grand_total == round(subtotal * MARKUP_RATE, 2).
    """
    new_invoice_number: str
    business: Business
    client_key: str
    items: tuple[LineItem, ...]
    subtotal: float
    grand_total: float

    @property
    def client_name(self) -> str:
        return self.items[0].client_name if self.items else ""

    @property
    def invoice_date(self) -> str:
        return self.items[0].invoice_date if self.items else ""


@dataclass(frozen=True)
class SummaryRow:
    """Synthetic trailer row: only `total` carries text, every other field is blank."""
    total: str = ""
