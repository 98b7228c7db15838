from __future__ import annotations

import re

from invoice_import.cli import main as cli_main

"""SUMMARY line format contract."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"rows=([0-9]+)\s+invoices=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)\s+"
    r"throughput_rps=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = (
        "SUMMARY files=1/1 success=1 failed=0 rows=5 invoices=5 "
        "elapsed_sec=0.84 throughput_rps=5.95"
    )
    assert SUMMARY_PATTERN.match(line)


def test_cli_summary_line_matches_contract(write_config, write_export, monkeypatch, capsys):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    write_export("export_1.csv")
    assert cli_main([]) == 0

    lines = [ln for ln in capsys.readouterr().out.splitlines() if ln.startswith("SUMMARY")]
    assert len(lines) == 1
    m = SUMMARY_PATTERN.match(lines[0])
    assert m, lines[0]
    assert m.group(5) == "5"
    assert m.group(6) == "5"
