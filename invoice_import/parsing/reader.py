from __future__ import annotations

from collections.abc import Sequence
from io import StringIO
from pathlib import Path

import pandas as pd

from ..models.line_item import RawRow

"""CSV body locator & parser.

The tabular part of an export starts at the line beginning with
`Company,Job Key,Reference Number`; everything above it is decorative text.
Lines from that header to the end are parsed as one CSV document (pandas,
every value kept as a string) and the export's own subtotal/tax trailer
rows are dropped before normalization.
"""

__all__ = [
    "CSV_HEADER_SIGNATURE",
    "SOURCE_SUMMARY_TOTALS",
    "MalformedInputError",
    "locate_csv_header",
    "is_source_summary_row",
    "parse_csv_body",
    "read_export_file",
    "split_lines",
]

CSV_HEADER_SIGNATURE = "Company,Job Key,Reference Number"
SOURCE_SUMMARY_TOTALS = frozenset({"Total cost", "Tax", "Total amount"})


class MalformedInputError(Exception):
    """Raised when an export has no recognizable CSV table; fatal for that file."""

    def __init__(self, file_name: str, reason: str | None = None) -> None:
        self.file_name = file_name
        self.reason = reason or "Could not find CSV header row"
        super().__init__(f"{self.reason} in {file_name}")


def read_export_file(path: Path) -> str:
    """Read an export as UTF-8 text (a leading BOM is dropped)."""
    return path.read_text(encoding="utf-8-sig")


def split_lines(text: str) -> list[str]:
    return text.splitlines()


def locate_csv_header(lines: Sequence[str]) -> int | None:
    """Index of the true tabular header line, None when absent (exact, case-sensitive prefix)."""
    for i, line in enumerate(lines):
        if line.startswith(CSV_HEADER_SIGNATURE):
            return i
    return None


def is_source_summary_row(row: RawRow) -> bool:
    """Export-side "Total cost" / "Tax" / "Total amount" lines (not billable)."""
    return (
        row.get("Company") == ""
        and row.get("Job Key") == ""
        and row.get("Total") in SOURCE_SUMMARY_TOTALS
    )


def parse_csv_body(text: str, file_name: str) -> list[RawRow]:
    """Locate the CSV table in `text` and return its data rows in order.

    Raises:
        MalformedInputError: header signature not found, or the table below it
            is not parseable as CSV (e.g. an unterminated quote). Rows with more
            fields than the header are not an error.
    """
    lines = split_lines(text)
    start = locate_csv_header(lines)
    if start is None:
        raise MalformedInputError(file_name)

    body = "\n".join(lines[start:])
    try:
        df = pd.read_csv(
            StringIO(body),
            # python engine + index_col=False keeps rows with stray trailing
            # fields, dropping whatever lies beyond the header width
            engine="python",
            sep=",",
            quotechar='"',
            doublequote=True,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            index_col=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise MalformedInputError(file_name, f"Unparseable CSV table ({e})") from e

    # Short rows are padded with NaN by pandas even with na_filter off
    df = df.fillna("")

    rows: list[RawRow] = []
    for record in df.to_dict(orient="records"):
        row: RawRow = {str(k): str(v) for k, v in record.items()}
        if is_source_summary_row(row):
            continue
        rows.append(row)
    return rows
