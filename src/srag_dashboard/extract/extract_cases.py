"""
Extract SRAG notification extracts (local file or OpenDataSUS URL) into a
raw DataFrame of string cells, one column per source field.
"""

from __future__ import annotations
import logging
import shutil
import tempfile
from pathlib import Path
import pandas as pd
import requests
from srag_dashboard.core.config import CSV_ENCODING, CSV_SEPARATOR, REMOTE_TIMEOUT
from srag_dashboard.core.errors import SourceDownloadError
from srag_dashboard.transforms.transform_cases import SOURCE_COLUMNS

log = logging.getLogger(__name__)

FALLBACK_ENCODING = "latin-1"

def _wanted(col: str) -> bool:
    return col.strip() in SOURCE_COLUMNS

def _read_csv_like(src, **kwargs) -> pd.DataFrame:
    return pd.read_csv(
        src,
        sep=CSV_SEPARATOR,
        dtype=str,
        keep_default_na=False,
        usecols=_wanted,
        on_bad_lines="skip",
        **kwargs,
    )

def _ensure_columns(df: pd.DataFrame) -> pd.DataFrame:
    df.columns = df.columns.str.strip()
    for col in SOURCE_COLUMNS:
        if col not in df.columns:
            df[col] = ""
    return df[SOURCE_COLUMNS]

def _read_with_fallback(src, name: str) -> pd.DataFrame:
    """Parse as CSV_ENCODING; on a decode error rewind and retry as latin-1."""
    try:
        return _read_csv_like(src, encoding=CSV_ENCODING)
    except UnicodeDecodeError:
        log.warning("%s is not %s encoded, retrying as %s", name, CSV_ENCODING, FALLBACK_ENCODING)
        if hasattr(src, "seek"):
            src.seek(0)
        return _read_csv_like(src, encoding=FALLBACK_ENCODING)

def read_cases_csv(path: str | Path) -> pd.DataFrame:
    """Read a local extract; falls back to latin-1 when utf-8 decoding fails."""
    path = Path(path)
    df = _read_with_fallback(path, path.name)
    log.info("Extracted cases: %s (%d rows)", path, len(df))
    return _ensure_columns(df)

def read_cases_url(url: str, session=None, timeout: int = REMOTE_TIMEOUT) -> pd.DataFrame:
    """Spool a remote extract to a temp file, then parse it like a local one."""
    http = session or requests
    try:
        resp = http.get(url, stream=True, timeout=timeout)
    except requests.RequestException as e:
        raise SourceDownloadError(f"Failed to download {url}: {e}") from e

    try:
        if resp.status_code != 200:
            raise SourceDownloadError(f"Failed to download {url}: {resp.status_code}")
        resp.raw.decode_content = True
        with tempfile.TemporaryFile() as buf:
            shutil.copyfileobj(resp.raw, buf)
            buf.seek(0)
            df = _read_with_fallback(buf, url)
    finally:
        resp.close()

    log.info("Extracted cases: %s (%d rows)", url, len(df))
    return _ensure_columns(df)
