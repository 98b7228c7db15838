from __future__ import annotations

from pathlib import Path

import pytest

from invoice_import.parsing.reader import (
    MalformedInputError,
    is_source_summary_row,
    locate_csv_header,
    parse_csv_body,
    read_export_file,
)


def test_locate_csv_header_exact_prefix():
    lines = [
        "invoice #1",
        "company,job key,reference number",  # wrong case
        " Company,Job Key,Reference Number",  # leading space
        "Company,Job Key,Reference Number,Job Title",
    ]
    assert locate_csv_header(lines) == 3
    assert locate_csv_header(lines[:3]) is None


def test_parse_csv_body_drops_source_summary_rows(sample_export: str):
    rows = parse_csv_body(sample_export, "export.csv")
    totals = [r["Total"] for r in rows]
    assert "Total cost" not in totals
    assert "Tax" not in totals
    assert "Total amount" not in totals
    # 6 item rows, including the one without a reference number (filtered later)
    assert len(rows) == 6
    assert rows[0]["Company"] == "Acme"
    assert rows[0]["Location"] == "Maumelle, AR"
    assert rows[0]["Quantity"] == "2"  # kept as text


def test_summary_label_with_company_is_kept():
    text = (
        "Company,Job Key,Reference Number,Job Title,Location,Total\n"
        "Acme,,R1,Welder,Conway,Tax\n"
        ",,,,,Tax\n"
    )
    rows = parse_csv_body(text, "x.csv")
    assert len(rows) == 1
    assert rows[0]["Company"] == "Acme"


def test_is_source_summary_row():
    assert is_source_summary_row({"Company": "", "Job Key": "", "Total": "Tax"})
    assert not is_source_summary_row({"Company": "", "Job Key": "", "Total": "12.00"})
    assert not is_source_summary_row({"Company": "", "Job Key": "JK", "Total": "Total cost"})


def test_missing_header_raises_malformed_input_with_file_name():
    text = "invoice #USI25-1\nItemization details 01/01/2025\nfoo,bar\n1,2\n"
    with pytest.raises(MalformedInputError) as e:
        parse_csv_body(text, "broken_export.csv")
    assert e.value.file_name == "broken_export.csv"
    assert "broken_export.csv" in str(e.value)


def test_quoted_fields_and_short_rows():
    text = (
        "Company,Job Key,Reference Number,Job Title,Location,Total\n"
        '"Acme, Inc.",JK1,R1,"Welder ""Senior""","Tyler, TX",10\n'
        "Acme,JK2,R2\n"
    )
    rows = parse_csv_body(text, "x.csv")
    assert rows[0]["Company"] == "Acme, Inc."
    assert rows[0]["Job Title"] == 'Welder "Senior"'
    assert rows[1]["Job Title"] == ""
    assert rows[1]["Total"] == ""


def test_header_only_table_yields_no_rows():
    assert parse_csv_body("Company,Job Key,Reference Number,Total\n", "x.csv") == []


def test_read_export_file_strips_bom(tmp_path: Path):
    p = tmp_path / "bom.csv"
    p.write_bytes("\ufeffinvoice #A1\n".encode("utf-8"))
    assert read_export_file(p).startswith("invoice #A1")


def test_row_with_stray_trailing_field_is_kept():
    text = (
        "Company,Job Key,Reference Number,Job Title,Location,Quantity,Unit,Average Cost,Total,Currency\n"
        "Acme,JK1,R1,Welder,Conway,2,clicks,10,20,USD\n"
        "Acme,JK2,R2,Cook,Tyler,1,clicks,5,5,USD,\n"
    )
    rows = parse_csv_body(text, "x.csv")
    assert len(rows) == 2
    assert rows[1]["Reference Number"] == "R2"
    assert rows[1]["Currency"] == "USD"
    assert len(rows[1]) == 10
