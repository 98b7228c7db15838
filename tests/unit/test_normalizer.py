from __future__ import annotations

import pytest

from invoice_import.models.line_item import LINE_ITEM_FIELDS, LineItem
from invoice_import.parsing.normalizer import format_numeric_values, normalize_row, to_line_item


SCENARIO_A = {
    "Company": "Acme",
    "Job Key": "JK1",
    "Reference Number": "R1",
    "Job Title": "Welder",
    "Location": "Maumelle, AR",
    "Quantity": "2",
    "Average Cost": "10",
    "Total": "20",
}


def test_normalize_row_maps_pretty_headers():
    record = normalize_row(SCENARIO_A)
    assert set(record) == set(LINE_ITEM_FIELDS)
    assert record["job_key"] == "JK1"
    assert record["reference_number"] == "R1"
    assert record["unit"] == ""
    assert record["currency"] == ""


def test_normalize_row_falls_back_to_snake_case():
    record = normalize_row({"job_key": "JK9", "Job Key": "", "job_title": "Cook"})
    assert record["job_key"] == "JK9"
    assert record["job_title"] == "Cook"


def test_pretty_header_wins_when_both_present():
    assert normalize_row({"Job Key": "A", "job_key": "B"})["job_key"] == "A"


def test_normalization_is_idempotent():
    canonical = format_numeric_values(normalize_row(SCENARIO_A))
    again = format_numeric_values(normalize_row(canonical))
    assert again == canonical
    assert LineItem(**again) == LineItem(**canonical)


@pytest.mark.parametrize(
    "raw_total, expected",
    [("20", "20.00"), ("4.5", "4.50"), ("-3.456", "-3.46"), ("  7 ", "7.00")],
)
def test_total_formatted_to_two_decimals(raw_total, expected):
    assert format_numeric_values({"total": raw_total})["total"] == expected


def test_non_numeric_and_empty_values_untouched():
    record = format_numeric_values({"total": "n/a", "average_cost": "", "quantity": "some"})
    assert record == {"total": "n/a", "average_cost": "", "quantity": "some"}


def test_quantity_truncated_not_rounded():
    assert format_numeric_values({"quantity": "2.9"})["quantity"] == 2
    assert format_numeric_values({"quantity": "-1.7"})["quantity"] == -1
    assert format_numeric_values({"quantity": "12"})["quantity"] == 12


def test_format_numeric_values_returns_new_dict():
    record = {"total": "1"}
    format_numeric_values(record)
    assert record == {"total": "1"}


def test_scenario_a_line_item():
    item = to_line_item(SCENARIO_A, "USI25-00123", "03/01/2025")
    assert item is not None
    assert item.total == "20.00"
    assert item.average_cost == "10.00"
    assert item.quantity == 2
    assert item.invoice_number == "USI25-00123"
    assert item.invoice_date == "03/01/2025"
    assert item.original_invoice_date == "03/01/2025"


@pytest.mark.parametrize(
    "raw",
    [
        {"Reference Number": "R1"},
        {"Job Title": "Welder"},
        {"Company": "Acme", "Job Key": "JK"},
        {},
    ],
)
def test_rows_without_reference_or_title_are_dropped(raw):
    assert to_line_item(raw) is None


def test_snake_case_row_is_retained():
    item = to_line_item({"reference_number": "R7", "job_title": "Nurse", "total": "3"})
    assert item is not None
    assert item.total == "3.00"
