"""Parsing of itemized CSV billing exports: header metadata, table body, field normalization."""

from .header import InvoiceInfo, extract_invoice_info
from .normalizer import format_numeric_values, normalize_row, to_line_item
from .reader import MalformedInputError, locate_csv_header, parse_csv_body, read_export_file

__all__ = [
    "InvoiceInfo",
    "MalformedInputError",
    "extract_invoice_info",
    "format_numeric_values",
    "locate_csv_header",
    "normalize_row",
    "parse_csv_body",
    "read_export_file",
    "to_line_item",
]
