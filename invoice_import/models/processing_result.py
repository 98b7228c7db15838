from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .invoice import AssembledInvoice

"""Processing result models for the CSV invoice importer.

This module defines the models for aggregating per-file and per-batch
processing results and metrics.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics (internal helper for ProcessingResult)."""
    file_name: str
    status: str  # success/failed
    line_items: int  # retained rows
    elapsed_seconds: float
    invoice_number: str = ""
    discarded_rows: int = 0
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results and summary output for one batch run.

    Contains all metrics needed for the SUMMARY output line plus the
    assembled invoices so callers can persist or render them.
    """
    success_files: int
    failed_files: int
    total_line_items: int
    total_invoices: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # total_line_items / elapsed
    file_stats: list[FileStat] | None = None
    invoices: list[AssembledInvoice] = field(default_factory=list)
