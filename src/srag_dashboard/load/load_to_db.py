"""
Load transformed case records into the database in fixed-size batches.
- Each batch is its own transaction; the next batch waits for the previous insert.
- Duplicate notification ids are skipped, never merged.
"""

from __future__ import annotations
import logging
from typing import Sequence
from srag_dashboard.core.config import BATCH_SIZE
from srag_dashboard.repositories import CaseRepository

log = logging.getLogger(__name__)

def load_cases(
    repository: CaseRepository,
    records: Sequence[dict],
    batch_size: int = BATCH_SIZE,
    label: str = "",
) -> int:
    """Insert ``records`` batch by batch and return how many were new."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    total = len(records)
    processed = 0
    inserted = 0
    prefix = f"{label}: " if label else ""

    for start in range(0, total, batch_size):
        batch = records[start:start + batch_size]
        inserted += repository.create_many(batch, skip_duplicates=True)
        processed += len(batch)
        log.info("%sInserted %d/%d records (%d new)", prefix, processed, total, inserted)

    return inserted
