from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from invoice_import.cli import main as cli_main

"""End-to-end batch run in mock mode: exports in ./data -> grouped CSVs in ./output."""

SECOND_EXPORT = """invoice #USI25-00456
Itemization details 04/01/2025 - 04/15/2025

Company,Job Key,Reference Number,Job Title,Location,Quantity,Unit,Average Cost,Total,Currency
Beta,JK7,R7,Nurse,"Carmel, IN",2,clicks,3.25,6.5,USD
Beta,JK8,R8,Driver,"Huntsville, AL",1,clicks,9,9,USD
,,,,,,,,Total cost,15.50
"""


@pytest.fixture(autouse=True)
def _mock_mode(monkeypatch):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")


def _read(path: Path) -> pd.DataFrame:
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def test_run_batch_success(write_config, write_export, temp_workdir: Path, capsys):
    write_export("export_1.csv")
    write_export("export_2.csv", SECOND_EXPORT)

    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0
    assert "SUMMARY files=2/2 success=2 failed=0 rows=7 invoices=7" in out

    output = temp_workdir / "output"
    everett = _read(output / "Everett_invoices.csv")
    assert list(everett["Invoice Number"][:1]) == ["HUR-00123"]
    totals = list(everett["Total"])
    assert "SUBTOTAL - Invoice HUR-00123" in totals
    assert totals[totals.index("GRAND TOTAL + 10% - Invoice HUR-00123") + 1] == "22.00"
    assert totals[totals.index("GRAND TOTAL + 10% - Invoice EVE-00123") + 1] == "4.95"

    whittingham = _read(output / "Whittingham_invoices.csv")
    numbers = [n for n in whittingham["Invoice Number"] if n]
    assert numbers == ["WHI-00123", "WHI-00456"]
    assert set(whittingham["Client"]) - {""} == {"Dana Whittingham"}

    mclain = _read(output / "McLain_invoices.csv")
    # no McLain clients configured: the location decides the fallback client
    assert [n for n in mclain["Invoice Number"] if n] == ["MCL-00123", "HUN-00456"]

    others = _read(output / "Others_invoices.csv")
    assert [n for n in others["Invoice Number"] if n] == ["OTH-00123"]

    assert list((temp_workdir / "logs").glob("errors-*.log")) == []


def test_run_batch_partial_failure(write_config, write_export, temp_workdir: Path, capsys):
    write_export("export_1.csv")
    write_export("zz_broken.csv", "invoice #USI25-1\nItemization details 01/01/2025\nfoo,bar\n1,2\n")

    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 2
    assert "SUMMARY files=2/2 success=1 failed=1 rows=5 invoices=5" in out
    [log_file] = list((temp_workdir / "logs").glob("errors-*.log"))
    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [(r["file"], r["error_type"], r["row"]) for r in records] == [("zz_broken.csv", "MALFORMED_INPUT", -1)]
    # the good file is still exported
    assert (temp_workdir / "output" / "Everett_invoices.csv").exists()
