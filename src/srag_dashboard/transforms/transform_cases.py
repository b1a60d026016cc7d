"""
Transform SRAG notification rows: map the raw semicolon CSV cells onto the
canonical case record and drop rows missing a required field.
"""

from __future__ import annotations
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Mapping
from srag_dashboard.transforms.normalize import (
    age_in_years,
    clean_string,
    parse_date,
    parse_number,
)

log = logging.getLogger(__name__)

# constants
SOURCE_COLUMNS = [
    "NU_NOTIFIC", "DT_NOTIFIC", "SEM_NOT", "ID_MUNICIP", "SG_UF_NOT",
    "CO_MUN_NOT", "SG_UF", "CO_MUN_RES", "CS_SEXO", "NU_IDADE_N",
    "TP_IDADE", "HOSPITAL", "DT_INTERNA", "UTI", "DT_ENTUTI",
    "VACINA_COV", "DOSE_1_COV", "DOSE_2_COV", "EVOLUCAO", "DT_EVOLUCA",
]
STATE_RX = re.compile(r"^[A-Za-z]{2}$")
YES = "1"
DOSE_CODES = {"1", "2"}

MISSING_ID = "missing_notification_id"
INVALID_DATE = "invalid_notification_date"
INVALID_STATE = "invalid_state"
TRANSFORM_ERROR = "transform_error"

MAX_SAMPLES = 10

@dataclass
class RejectionReport:
    """Counts dropped rows by reason and keeps a few (line, reason) samples."""
    total: int = 0
    by_reason: Counter = field(default_factory=Counter)
    samples: list[tuple[int, str]] = field(default_factory=list)

    def add(self, line: int, reason: str) -> None:
        self.total += 1
        self.by_reason[reason] += 1
        if len(self.samples) < MAX_SAMPLES:
            self.samples.append((line, reason))

    def merge(self, other: "RejectionReport") -> None:
        self.total += other.total
        self.by_reason.update(other.by_reason)
        room = MAX_SAMPLES - len(self.samples)
        self.samples.extend(other.samples[:max(room, 0)])

# helpers
def _state_code(raw) -> str | None:
    s = clean_string(raw)
    if s is None or not STATE_RX.match(s):
        return None
    return s.upper()

def _build_record(row: Mapping) -> tuple[dict | None, str | None]:
    notification_id = clean_string(row.get("NU_NOTIFIC"))
    if notification_id is None:
        return None, MISSING_ID

    notification_date = parse_date(row.get("DT_NOTIFIC"))
    if notification_date is None:
        return None, INVALID_DATE

    state = _state_code(row.get("SG_UF_NOT"))
    if state is None:
        return None, INVALID_STATE

    record = {
        "notification_id": notification_id,
        "notification_date": notification_date,
        "week_number": parse_number(row.get("SEM_NOT")),
        "state": state,
        "state_residence": clean_string(row.get("SG_UF")),
        "municipality": clean_string(row.get("CO_MUN_NOT")),
        "municipality_name": clean_string(row.get("ID_MUNICIP")),
        "municipality_res": clean_string(row.get("CO_MUN_RES")),
        "sex": clean_string(row.get("CS_SEXO")),
        "age_years": age_in_years(row.get("NU_IDADE_N"), row.get("TP_IDADE")),
        "age_type": parse_number(row.get("TP_IDADE")),
        "hospitalized": row.get("HOSPITAL") == YES,
        "hospital_date": parse_date(row.get("DT_INTERNA")),
        "icu": row.get("UTI") == YES,
        "icu_entry_date": parse_date(row.get("DT_ENTUTI")),
        "vaccinated": row.get("VACINA_COV") in DOSE_CODES,
        "dose1_date": parse_date(row.get("DOSE_1_COV")),
        "dose2_date": parse_date(row.get("DOSE_2_COV")),
        "evolution": clean_string(row.get("EVOLUCAO")),
        "evolution_date": parse_date(row.get("DT_EVOLUCA")),
    }
    return record, None

def check_row(row: Mapping, line: int = 0) -> tuple[dict | None, str | None]:
    """Return (record, None) for an accepted row or (None, reason) otherwise."""
    try:
        return _build_record(row)
    except Exception as e:
        log.warning("Error transforming row %d: %s", line, e)
        return None, TRANSFORM_ERROR

def transform_row(row: Mapping) -> dict | None:
    record, _ = check_row(row)
    return record

def transform_rows(rows: Iterable[Mapping], first_line: int = 2) -> tuple[list[dict], RejectionReport]:
    """Transform every row; line numbers count the header as line 1."""
    records: list[dict] = []
    report = RejectionReport()
    for line, row in enumerate(rows, start=first_line):
        record, reason = check_row(row, line)
        if record is None:
            report.add(line, reason)
        else:
            records.append(record)
    return records, report
