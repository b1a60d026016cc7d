"""
Cell-level normalizers for SRAG extracts.

Every helper is total: malformed input yields None, never an exception.
"""

from __future__ import annotations
import re
from datetime import date, datetime
import pandas as pd

EMPTY_QUOTES = '""'
INT_RX = re.compile(r"^[+-]?\d+$")

DMY_FORMATS = ("%d/%m/%Y",)
ISO_FORMATS = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S")

# TP_IDADE unit code -> divisor to years
AGE_UNIT_DIVISORS = {1: 365, 2: 12, 3: 1}

def _is_missing(raw) -> bool:
    if raw is None:
        return True
    try:
        return bool(pd.isna(raw))
    except (TypeError, ValueError):
        return False

def clean_string(raw) -> str | None:
    """Strip every double quote plus surrounding whitespace; blank -> None."""
    if _is_missing(raw):
        return None
    s = str(raw)
    if s == "" or s == EMPTY_QUOTES:
        return None
    s = s.replace('"', "").strip()
    return s or None

def parse_number(raw) -> int | None:
    s = clean_string(raw)
    if s is None or not INT_RX.match(s):
        return None
    return int(s, 10)

def _strptime_first(s: str, formats: tuple[str, ...]) -> date | None:
    for fmt in formats:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None

def parse_date(raw) -> date | None:
    """
    DD/MM/YYYY when the value holds a slash, ISO otherwise.
    Impossible calendar dates (31/02) come back as None.
    """
    s = clean_string(raw)
    if s is None:
        return None
    if "/" in s:
        return _strptime_first(s, DMY_FORMATS)
    return _strptime_first(s, ISO_FORMATS)

def age_in_years(age_value, age_type) -> int | None:
    age = parse_number(age_value)
    unit = parse_number(age_type)
    if age is None or unit is None:
        return None
    divisor = AGE_UNIT_DIVISORS.get(unit)
    if divisor is None:
        return None
    return age // divisor
