"""
Shared fixtures: a throwaway SQLite database and a writer for SRAG-shaped CSVs.
"""
import io
from datetime import date
from pathlib import Path

import pytest

from srag_dashboard.core.db import create_tables, get_engine
from srag_dashboard.repositories import CaseRepository
from srag_dashboard.transforms.transform_cases import SOURCE_COLUMNS


def make_row(**overrides) -> dict:
    """A raw source row that passes every check unless overridden."""
    row = {col: "" for col in SOURCE_COLUMNS}
    row.update({
        "NU_NOTIFIC": "1000",
        "DT_NOTIFIC": "15/03/2024",
        "SEM_NOT": "11",
        "ID_MUNICIP": "SAO PAULO",
        "SG_UF_NOT": "SP",
        "CO_MUN_NOT": "355030",
        "SG_UF": "SP",
        "CO_MUN_RES": "355030",
        "CS_SEXO": "F",
        "NU_IDADE_N": "45",
        "TP_IDADE": "3",
    })
    row.update(overrides)
    return row


def make_case(notification_id: str, notification_date: date, **overrides) -> dict:
    """A canonical record ready for CaseRepository.create_many."""
    record = {
        "notification_id": notification_id,
        "notification_date": notification_date,
        "week_number": None,
        "state": "SP",
        "state_residence": None,
        "municipality": "355030",
        "municipality_name": "SAO PAULO",
        "municipality_res": None,
        "sex": None,
        "age_years": None,
        "age_type": None,
        "hospitalized": False,
        "hospital_date": None,
        "icu": False,
        "icu_entry_date": None,
        "vaccinated": False,
        "dose1_date": None,
        "dose2_date": None,
        "evolution": None,
        "evolution_date": None,
    }
    record.update(overrides)
    return record


def csv_text(rows: list[dict], quote: bool = True) -> str:
    def cell(v):
        return f'"{v}"' if quote else v
    lines = [";".join(cell(c) for c in SOURCE_COLUMNS)]
    for row in rows:
        lines.append(";".join(cell(row.get(c, "")) for c in SOURCE_COLUMNS))
    return "\n".join(lines) + "\n"


@pytest.fixture
def engine(tmp_path):
    eng = get_engine(f"sqlite:///{tmp_path / 'srag.db'}")
    create_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def repo(engine):
    return CaseRepository(engine)


@pytest.fixture
def write_csv(tmp_path):
    """Write rows to <tmp_path>/<folder>/<name> and return the path."""
    def _write(name: str, rows: list[dict], folder: str = "partial",
               encoding: str = "utf-8", quote: bool = True) -> Path:
        directory = tmp_path / folder
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(csv_text(rows, quote=quote), encoding=encoding)
        return path
    return _write


class FakeRaw(io.BytesIO):
    decode_content = False


class FakeResponse:
    def __init__(self, status_code: int = 200, body: str = "", encoding: str = "utf-8"):
        self.status_code = status_code
        self.raw = FakeRaw(body.encode(encoding))
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    """Stands in for requests: maps URL -> FakeResponse or an exception to raise."""
    def __init__(self, responses: dict):
        self.responses = responses
        self.requested = []
        self.timeouts = []

    def get(self, url, stream=False, timeout=None):
        self.requested.append(url)
        self.timeouts.append(timeout)
        outcome = self.responses[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
