"""Domain models for the CSV invoice importer.

This package contains the domain model classes used throughout the application:
line items and their business classification, the client directory, assembled
invoices, per-file processing context and batch results.
"""

from .business import Business
from .client import Client, ClientDirectory, ResolvedClient
from .config_models import DatabaseConfig, ImportConfig
from .csv_file import CsvFile, FileStatus
from .invoice import MARKUP_RATE, AssembledInvoice, SummaryRow
from .line_item import LINE_ITEM_FIELDS, LineItem, RawRow

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    # Reference data
    "Client",
    "ClientDirectory",
    "ResolvedClient",
    # Processing models
    "Business",
    "RawRow",
    "LineItem",
    "LINE_ITEM_FIELDS",
    "AssembledInvoice",
    "SummaryRow",
    "MARKUP_RATE",
    "CsvFile",
    "FileStatus",
]
