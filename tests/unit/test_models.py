from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from invoice_import.models import Business, CsvFile, FileStatus, LineItem


def test_business_keys_and_display_names():
    assert [b.key for b in Business] == ["everett", "whittingham", "mclain", "others"]
    assert Business.MCLAIN.display_name == "McLain"
    assert Business.from_key(" Everett ") is Business.EVERETT
    assert Business.from_key("martian") is None
    assert Business.from_key(None) is None


def test_line_item_is_immutable():
    item = LineItem(reference_number="R1", job_title="Welder")
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.total = "1.00"  # type: ignore[misc]


def test_line_item_billable_and_client_key():
    assert LineItem(reference_number="R1", job_title="Welder").is_billable
    assert not LineItem(reference_number="R1").is_billable
    assert LineItem(client_id="c-1", client_code="HUR").client_key == "c-1"
    assert LineItem(client_code="OTH").client_key == "OTH"


@pytest.mark.parametrize("total, expected", [("20.00", 20.0), ("", 0.0), ("n/a", 0.0), ("nan", 0.0), ("inf", 0.0)])
def test_line_item_total_amount(total, expected):
    assert LineItem(total=total).total_amount() == expected


def test_csv_file_defaults():
    f = CsvFile(path=Path("data/x.csv"), name="x.csv")
    assert f.status is FileStatus.PENDING
    assert f.line_items == ()
    assert f.error is None
