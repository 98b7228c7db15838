from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from .line_item import LineItem

"""CsvFile domain model and FileStatus enum.

The CsvFile represents the processing context for a single export file,
tracking its status through the import lifecycle from pending to success/failed.
"""


class FileStatus(Enum):
    """Status enum for CsvFile processing lifecycle.

    State transitions: pending → processing → (success | failed)

    - PENDING: File discovered but not yet processed
    - PROCESSING: File is currently being processed
    - SUCCESS: File transformed, all line items resolved
    - FAILED: File rejected (malformed export, unreadable file)
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class CsvFile:
    """Processing context for a single export file.

    A failed file never carries line items: failures are all-or-nothing per file.
    """
    path: Path                            # Full path to the export
    name: str                             # File name
    line_items: tuple[LineItem, ...] = ()  # Retained, resolved line items
    invoice_number: str = ""              # From header metadata
    invoice_date: str = ""                # From header metadata
    start_time: datetime | None = None    # Processing start (UTC)
    end_time: datetime | None = None      # Processing end (UTC)
    status: FileStatus = FileStatus.PENDING
    discarded_rows: int = 0               # Parsed rows dropped by the billable filter
    error: str | None = None              # Failure reason summary
