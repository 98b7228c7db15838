# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from invoice_import.logging.init import reset_logging
from invoice_import.models.client import Client


SAMPLE_EXPORT = """Itemized statement for invoice #USI25-00123 (Acme Staffing)
Billing contact: accounts@example.com
Itemization details   "03/01/2025 - 03/15/2025"

Company,Job Key,Reference Number,Job Title,Location,Quantity,Unit,Average Cost,Total,Currency
Acme,JK1,R1,Welder,"Maumelle, AR",2,clicks,10,20,USD
Acme,JK2,R2,Insurance Representative,"Dallas, TX",3,clicks,1.5,4.5,USD
Acme,JK3,R3,Nurse,"Indianapolis, IN",1,clicks,12.5,12.5,USD
Acme,JK4,R4,Driver,"Birmingham, AL",4,clicks,2,8,USD
Acme,JK5,R5,Cook,"Portland, OR",1,clicks,5,5,USD
Acme,JK6,,Summary Without Reference,"Maumelle, AR",1,clicks,1,1,USD
,,,,,,,,Total cost,50.00
,,,,,,,,Tax,0.00
,,,,,,,,Total amount,50.00
"""


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./output
clients:
  everett:
    - id: "c-101"
      name: "Jeanette Hurley"
      locations: "Maumelle, AR, Conway"
    - id: "c-102"
      name: "Brad Everett"
      locations: "Dallas, TX, Tyler"
  whittingham:
    - id: "c-201"
      name: "Dana Whittingham"
      locations: "Indianapolis, Carmel"
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: invoices
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "invoices.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_export() -> str:
    return SAMPLE_EXPORT


@pytest.fixture()
def write_export(temp_workdir: Path):
    def _write(name: str, text: str = SAMPLE_EXPORT) -> Path:
        path = temp_workdir / "data" / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def client_directory() -> dict[str, list[Client]]:
    return {
        "everett": [
            Client(id="c-101", name="Jeanette Hurley", business="everett", locations="Maumelle, AR, Conway"),
            Client(id="c-102", name="Brad Everett", business="everett", locations="Dallas, TX, Tyler"),
        ],
        "whittingham": [
            Client(id="c-201", name="Dana Whittingham", business="whittingham", locations="Indianapolis, Carmel"),
        ],
    }


@pytest.fixture(autouse=True)
def _reset_logging_state():
    # CLI runs attach a stdout handler and stop propagation; caplog needs it back
    yield
    reset_logging()
