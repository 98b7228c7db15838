from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary line rendering service.

Format:
SUMMARY files={total}/{total} success={success} failed={failed} rows={rows}
invoices={invoices} elapsed_sec={elapsed} throughput_rps={throughput}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render a SUMMARY line from ProcessingResult.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2025, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2025, 3, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_line_items=40,
        ...     total_invoices=2, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=20.0
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 rows=40 invoices=2 elapsed_sec=2 throughput_rps=20'
    """
    elapsed_str = _format_number(result.elapsed_seconds)
    throughput_str = _format_number(result.throughput_rows_per_sec)

    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_line_items} "
        f"invoices={result.total_invoices} "
        f"elapsed_sec={elapsed_str} "
        f"throughput_rps={throughput_str}"
    )
