"""
CLI wrapper for the SRAG seed pipeline.
Run with:
    python -m srag_dashboard.scripts.run_seed
    python -m srag_dashboard.scripts.run_seed --full --on-error abort
Defaults come from the environment (.env): USE_FULL_DATA, SRAG_PARTIAL_DIR, ON_ERROR.
"""
from __future__ import annotations

import argparse
import logging
from srag_dashboard.core.config import LOG_LEVEL, ON_ERROR, PARTIAL_DIR, USE_FULL_DATA
from srag_dashboard.core.db import create_tables
from srag_dashboard.core.logging_setup import setup_logging
from srag_dashboard.repositories import CaseRepository
from srag_dashboard.services.seed import OnError, seed_all_files


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the SRAG cases database.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--full",
        dest="use_full_data",
        action="store_true",
        default=USE_FULL_DATA,
        help="Download the yearly OpenDataSUS extracts. Default: USE_FULL_DATA.",
    )
    mode.add_argument(
        "--partial",
        dest="use_full_data",
        action="store_false",
        help="Read every .csv in --data-dir.",
    )
    parser.add_argument(
        "--data-dir",
        default=str(PARTIAL_DIR),
        help="Directory of local extracts. Default: SRAG_PARTIAL_DIR or data/partial.",
    )
    parser.add_argument(
        "--on-error",
        choices=[p.value for p in OnError],
        default=ON_ERROR,
        help="continue | abort after a failed source. Default: continue locally, abort remotely.",
    )
    parser.add_argument("--log-level", default=LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    log = logging.getLogger(__name__)

    log.info("Starting seed with %s dataset...", "FULL" if args.use_full_data else "PARTIAL")
    try:
        engine = create_tables()
        summary = seed_all_files(
            use_full_data=args.use_full_data,
            repository=CaseRepository(engine),
            data_dir=args.data_dir,
            on_error=args.on_error,
        )
    except Exception as e:
        log.error("Seed failed: %s", e, exc_info=True)
        return 1

    log.info("Seed completed successfully! %d records imported", summary.total_inserted)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
