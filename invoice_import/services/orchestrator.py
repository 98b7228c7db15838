from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..db.invoice_store import InvoiceStoreError, SaveResult, load_client_directory, save_invoices
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.business import Business
from ..models.client import ClientDirectory
from ..models.config_models import ImportConfig
from ..models.csv_file import CsvFile, FileStatus
from ..models.invoice import AssembledInvoice
from ..models.line_item import LineItem
from ..models.processing_result import FileStat, ProcessingResult
from ..parsing.header import InvoiceInfo, extract_invoice_info
from ..parsing.normalizer import to_line_item
from ..parsing.reader import MalformedInputError, parse_csv_body, read_export_file, split_lines
from .assembler import assemble_invoices
from .classifier import classify_location
from .client_resolver import resolve_line_item
from .exporter import write_grouped_files
from .progress import ProgressTracker

"""Service orchestration for the CSV invoice importer.

Coordinates one batch run: scanning the source directory, transforming each
export file independently, merging completed files into the batch
accumulator, assembling invoices per client bucket, exporting grouped CSV
files and (in live mode) persisting invoices in a single transaction.

A file that fails (malformed export, unreadable file) contributes nothing to
the batch; it is recorded in the error log and the remaining files continue.
"""

logger = logging.getLogger(__name__)

FILE_LEVEL_ROW = -1


class ProcessingError(Exception):
    """Fatal error for the whole run (missing directory, persistence failure)."""
    pass


BucketKey = tuple[Business, str]


@dataclass
class BatchAccumulator:
    """Line items of one batch grouped by (business, client key).

    Append-only; files are merged one at a time after they are fully resolved,
    so the grouping never sees a partially transformed file.
    """
    buckets: dict[BucketKey, list[LineItem]] = field(default_factory=dict)

    def merge(self, items: list[LineItem]) -> None:
        for item in items:
            self.buckets.setdefault((item.business, item.client_key), []).append(item)

    @property
    def total_items(self) -> int:
        return sum(len(items) for items in self.buckets.values())

    def business_counts(self) -> dict[Business, int]:
        counts = {business: 0 for business in Business}
        for (business, _), items in self.buckets.items():
            counts[business] += len(items)
        return counts

    def assemble(self) -> list[AssembledInvoice]:
        """One invoice per `new_invoice_number` across the whole batch.

        Clients sharing a surname code (Smith / Smithers -> SMI) end up on the
        same invoice; the first bucket that produced the number owns it.
        """
        items = [item for bucket in self.buckets.values() for item in bucket]
        invoices = assemble_invoices(items)
        for invoice in invoices:
            client_keys = {item.client_key for item in invoice.items}
            if len(client_keys) > 1:
                logger.warning(
                    f"invoice {invoice.new_invoice_number} spans clients "
                    f"{', '.join(sorted(client_keys))}"
                )
        return invoices


def scan_csv_files(directory: Path) -> list[Path]:
    """Scan directory for .csv exports (non-recursive, suffix case-insensitive).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".csv")
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def transform_export(
    text: str, file_name: str, directory: ClientDirectory
) -> tuple[InvoiceInfo, list[LineItem], int]:
    """Raw export text -> resolved line items.

    Returns:
        (header metadata, resolved line items in file order, discarded row count)

    Raises:
        MalformedInputError: no CSV table in the export
    """
    info = extract_invoice_info(split_lines(text))
    raw_rows = parse_csv_body(text, file_name)

    items: list[LineItem] = []
    discarded = 0
    for raw in raw_rows:
        item = to_line_item(raw, info.invoice_number, info.invoice_date)
        if item is None:
            discarded += 1
            continue
        item = replace(item, business=classify_location(item.location, item.job_title))
        items.append(resolve_line_item(item, directory))
    return info, items, discarded


def process_file(path: Path, directory: ClientDirectory, error_log: ErrorLogBuffer) -> CsvFile:
    """Transform a single export file; failures are recorded and returned, not raised."""
    start_time = datetime.now(UTC)
    try:
        text = read_export_file(path)
        info, items, discarded = transform_export(text, path.name, directory)
    except MalformedInputError as e:
        error_log.append(
            ErrorRecord.create(path.name, "parse", FILE_LEVEL_ROW, "MALFORMED_INPUT", str(e))
        )
        logger.error(f"{path.name}: {e}")
        return _failed(path, start_time, str(e))
    except (OSError, UnicodeDecodeError) as e:
        error_log.append(
            ErrorRecord.create(path.name, "read", FILE_LEVEL_ROW, "READ_ERROR", str(e))
        )
        logger.error(f"{path.name}: unreadable export: {e}")
        return _failed(path, start_time, f"unreadable export: {e}")

    if info.missing_fields:
        logger.warning(f"{path.name}: header metadata missing: {', '.join(info.missing_fields)}")

    logger.info(
        f"Processed {len(items)} valid rows from {path.name} "
        f"(Invoice: {info.invoice_number}, Date: {info.invoice_date})"
    )
    return CsvFile(
        path=path,
        name=path.name,
        line_items=tuple(items),
        invoice_number=info.invoice_number,
        invoice_date=info.invoice_date,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.SUCCESS,
        discarded_rows=discarded,
    )


def _failed(path: Path, start_time: datetime, error: str) -> CsvFile:
    return CsvFile(
        path=path,
        name=path.name,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.FAILED,
        error=error,
    )


def persist_invoices(cursor: Any, invoices: list[AssembledInvoice], error_log: ErrorLogBuffer) -> SaveResult:
    """Save all invoices of the batch in one transaction.

    Raises:
        ProcessingError: insert or commit failed (the transaction is rolled back)
    """
    try:
        cursor.execute("BEGIN")
        saved = save_invoices(cursor, invoices)
        cursor.execute("COMMIT")
    except Exception as e:
        try:
            cursor.execute("ROLLBACK")
        except Exception as rollback_e:
            error_log.append(
                ErrorRecord.create("<BATCH>", "persist", FILE_LEVEL_ROW, "TRANSACTION_ROLLBACK_ERROR", str(rollback_e))
            )
        error_type = "PERSIST_ERROR" if isinstance(e, InvoiceStoreError) else "TRANSACTION_ERROR"
        error_log.append(ErrorRecord.create("<BATCH>", "persist", FILE_LEVEL_ROW, error_type, str(e)))
        raise ProcessingError(f"persisting invoices failed: {e}") from e
    logger.info(f"Saved {saved.invoices} invoices with {saved.items} items")
    return saved


def _resolve_directory(config: ImportConfig, cursor: Any) -> ClientDirectory:
    if config.clients or cursor is None:
        return config.clients
    try:
        return load_client_directory(cursor)
    except InvoiceStoreError as e:
        raise ProcessingError(str(e)) from e


def process_all(
    config: ImportConfig,
    cursor: Any = None,
    *,
    export: bool = True,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Process all export files in the configured directory.

    1. Scan the directory for .csv files
    2. Transform each file, merging successful ones into the accumulator
    3. Assemble invoices per (business, client) bucket
    4. Write grouped CSV exports (when `export`) and persist (when a cursor is given)

    Args:
        config: Import configuration with directory and client directory
        cursor: Database cursor (None = mock mode, nothing persisted)

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    file_paths = scan_csv_files(Path(config.source_directory))
    directory = _resolve_directory(config, cursor)

    accumulator = BatchAccumulator()
    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0

    if file_paths:
        logger.info(f"Found {len(file_paths)} CSV files to process")

    with ProgressTracker(len(file_paths), description="Processing exports") as progress:
        for file_path in file_paths:
            progress.start_file(file_path)

            csv_file = process_file(file_path, directory, error_log)
            if csv_file.status == FileStatus.SUCCESS:
                success_count += 1
                accumulator.merge(list(csv_file.line_items))
            else:
                failed_count += 1

            progress.set_postfix(success=success_count, failed=failed_count, rows=accumulator.total_items)
            progress.finish_file(success=(csv_file.status == FileStatus.SUCCESS))

            elapsed = 0.0
            if csv_file.start_time and csv_file.end_time:
                elapsed = (csv_file.end_time - csv_file.start_time).total_seconds()
            file_stats.append(
                FileStat(
                    file_name=csv_file.name,
                    status=csv_file.status.value,
                    line_items=len(csv_file.line_items),
                    elapsed_seconds=elapsed,
                    invoice_number=csv_file.invoice_number,
                    discarded_rows=csv_file.discarded_rows,
                    error=csv_file.error,
                )
            )

    for business, count in accumulator.business_counts().items():
        logger.debug(f"{business.display_name}: {count} records")

    invoices = accumulator.assemble()

    try:
        if export and invoices:
            try:
                write_grouped_files(invoices, Path(config.output_directory))
            except OSError as e:
                raise ProcessingError(f"writing exports failed: {e}") from e
        if cursor is not None and invoices:
            persist_invoices(cursor, invoices, error_log)
    finally:
        try:
            error_log.flush()
        except OSError as e:
            logger.warning(f"failed writing error log: {e}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    total_items = accumulator.total_items
    throughput = total_items / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_line_items=total_items,
        total_invoices=len(invoices),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput,
        file_stats=file_stats,
        invoices=invoices,
    )
