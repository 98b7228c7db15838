from __future__ import annotations

from datetime import UTC, datetime

from invoice_import.models.processing_result import ProcessingResult
from invoice_import.services.summary import render_summary_line


def _result(**overrides) -> ProcessingResult:
    now = datetime.now(UTC)
    values = dict(
        success_files=2,
        failed_files=1,
        total_line_items=10,
        total_invoices=4,
        start_time=now,
        end_time=now,
        elapsed_seconds=0.5,
        throughput_rows_per_sec=20.0,
    )
    values.update(overrides)
    return ProcessingResult(**values)


def test_render_summary_line():
    line = render_summary_line(3, _result())
    assert line == (
        "SUMMARY files=3/3 success=2 failed=1 rows=10 invoices=4 "
        "elapsed_sec=0.5 throughput_rps=20"
    )


def test_zero_and_tiny_numbers():
    line = render_summary_line(0, _result(
        success_files=0, failed_files=0, total_line_items=0, total_invoices=0,
        elapsed_seconds=0.0012, throughput_rows_per_sec=0.0,
    ))
    assert "elapsed_sec=0.0012" in line
    assert line.endswith("throughput_rps=0")
    assert "e-" not in line
