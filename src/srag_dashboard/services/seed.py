"""
Seed service - drives extract, transform and load for each SRAG source and
orchestrates multi-file (local) or multi-year (remote) runs.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping
import pandas as pd
from srag_dashboard.core.config import (
    BATCH_SIZE,
    ON_ERROR,
    PARTIAL_DIR,
    REMOTE_CSV_URLS,
    USE_FULL_DATA,
)
from srag_dashboard.core.db import get_engine
from srag_dashboard.core.errors import DataDirectoryNotFound
from srag_dashboard.extract.extract_cases import read_cases_csv, read_cases_url
from srag_dashboard.load.load_to_db import load_cases
from srag_dashboard.repositories import CaseRepository
from srag_dashboard.transforms.transform_cases import RejectionReport, transform_rows

log = logging.getLogger(__name__)


class OnError(str, Enum):
    CONTINUE = "continue"
    ABORT = "abort"


class SourceState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    TRANSFORMING = "transforming"
    INSERTING = "inserting"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class SourceResult:
    source: str
    state: SourceState = SourceState.IDLE
    parsed: int = 0
    inserted: int = 0
    rejections: RejectionReport = field(default_factory=RejectionReport)
    error: str | None = None


@dataclass
class SeedSummary:
    mode: str
    results: list[SourceResult] = field(default_factory=list)

    @property
    def total_inserted(self) -> int:
        return sum(r.inserted for r in self.results)

    @property
    def failed(self) -> list[SourceResult]:
        return [r for r in self.results if r.state is SourceState.FAILED]


def _repository(repository: CaseRepository | None) -> CaseRepository:
    return repository or CaseRepository(get_engine())


def _seed_source(
    result: SourceResult,
    read: Callable[[], pd.DataFrame],
    repository: CaseRepository,
    batch_size: int,
) -> SourceResult:
    result.state = SourceState.PARSING
    df = read()

    result.state = SourceState.TRANSFORMING
    records, report = transform_rows(df.to_dict("records"))
    result.parsed = len(records)
    result.rejections = report
    if report.total:
        log.info("%s: skipped %d rows %s", result.source, report.total, dict(report.by_reason))
    log.info("Parsed %d records from %s, inserting into database...", len(records), result.source)

    result.state = SourceState.INSERTING
    result.inserted = load_cases(repository, records, batch_size=batch_size, label=result.source)

    result.state = SourceState.COMPLETED
    log.info("Successfully imported %d records from %s", result.inserted, result.source)
    return result


def _run(result, read, repository, batch_size) -> SourceResult:
    try:
        return _seed_source(result, read, repository, batch_size)
    except Exception as e:
        result.state = SourceState.FAILED
        result.error = str(e)
        raise


def seed_csv_source(path: str | Path, repository: CaseRepository | None = None,
                    batch_size: int = BATCH_SIZE, result: SourceResult | None = None) -> SourceResult:
    """Ingest one local extract into ``result``, which keeps its diagnostics if the source fails."""
    path = Path(path)
    log.info("Starting to import data from %s", path)
    result = result or SourceResult(source=path.name)
    return _run(result, lambda: read_cases_csv(path), _repository(repository), batch_size)


def seed_url_source(url: str, year: int, repository: CaseRepository | None = None,
                    session=None, batch_size: int = BATCH_SIZE,
                    result: SourceResult | None = None) -> SourceResult:
    log.info("Starting to download and import data from %s", url)
    result = result or SourceResult(source=f"year {year}")
    return _run(result, lambda: read_cases_url(url, session=session), _repository(repository), batch_size)


def seed_from_csv(path: str | Path, repository: CaseRepository | None = None,
                  batch_size: int = BATCH_SIZE) -> int:
    """Ingest one local extract; returns the number of new records."""
    return seed_csv_source(path, repository, batch_size).inserted


def seed_from_url(url: str, year: int, repository: CaseRepository | None = None,
                  session=None, batch_size: int = BATCH_SIZE) -> int:
    """Ingest one remote yearly extract; returns the number of new records."""
    return seed_url_source(url, year, repository, session, batch_size).inserted


def resolve_on_error(on_error: OnError | str | None, use_full_data: bool) -> OnError:
    """Explicit policy wins, then ON_ERROR from the environment, then the mode default."""
    choice = on_error or ON_ERROR
    if choice is None:
        return OnError.ABORT if use_full_data else OnError.CONTINUE
    return OnError(choice)


def _seed_remote(repository, urls, policy, session, batch_size) -> SeedSummary:
    summary = SeedSummary(mode="remote")
    years = sorted(urls)
    log.info("Starting to seed database from REMOTE full dataset...")
    log.info("Found %d years to process: %s", len(years), ", ".join(map(str, years)))

    for year in years:
        result = SourceResult(source=f"year {year}")
        summary.results.append(result)
        try:
            seed_url_source(urls[year], year, repository, session, batch_size, result=result)
        except Exception as e:
            log.error("Failed to import year %d: %s", year, e)
            if policy is OnError.ABORT:
                raise
            continue
        log.info("Progress: %d total records imported so far", summary.total_inserted)

    return summary


def _seed_local(repository, data_dir, policy, batch_size) -> SeedSummary:
    summary = SeedSummary(mode="local")
    data_dir = Path(data_dir)
    log.info("Starting to seed database from LOCAL partial dataset...")

    if not data_dir.is_dir():
        log.error("Data directory not found: %s", data_dir)
        raise DataDirectoryNotFound(f"Data directory not found: {data_dir}")

    files = sorted(data_dir.glob("*.csv"), key=lambda p: p.name)
    if not files:
        log.warning("No CSV files found in %s", data_dir)
        return summary

    log.info("Found %d CSV files to process", len(files))
    for path in files:
        result = SourceResult(source=path.name)
        summary.results.append(result)
        try:
            seed_csv_source(path, repository, batch_size, result=result)
        except Exception as e:
            log.error("Error processing file %s: %s", path.name, e)
            if policy is OnError.ABORT:
                raise

    return summary


def seed_all_files(
    use_full_data: bool = USE_FULL_DATA,
    repository: CaseRepository | None = None,
    data_dir: str | Path = PARTIAL_DIR,
    urls: Mapping[int, str] = REMOTE_CSV_URLS,
    on_error: OnError | str | None = None,
    session=None,
    batch_size: int = BATCH_SIZE,
) -> SeedSummary:
    """
    Seed from the remote yearly extracts (use_full_data) or from every .csv in
    data_dir, one source at a time. Local runs continue past a failed file and
    remote runs abort on the first failed year unless on_error says otherwise.
    """
    repository = _repository(repository)
    policy = resolve_on_error(on_error, use_full_data)

    if use_full_data:
        summary = _seed_remote(repository, urls, policy, session, batch_size)
    else:
        summary = _seed_local(repository, data_dir, policy, batch_size)

    log.info(
        "Seeding completed! Total records imported: %d (%d sources, %d failed)",
        summary.total_inserted, len(summary.results), len(summary.failed),
    )
    return summary
