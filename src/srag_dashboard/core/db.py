import logging
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from srag_dashboard.core.config import DATABASE_URL
from srag_dashboard.models import Base

log = logging.getLogger(__name__)

def get_engine(url: str | None = None) -> Engine:
    url = url or DATABASE_URL
    if not url:
        raise ValueError("Missing required DB environment variables")
    try:
        return create_engine(url, echo=False, future=True)
    except SQLAlchemyError as e:
        log.error("Failed to create engine: %s", e)
        raise

def create_tables(engine: Engine | None = None) -> Engine:
    """Create missing tables (idempotent)."""
    engine = engine or get_engine()
    insp = inspect(engine)
    existing = set(insp.get_table_names())
    expected = set(Base.metadata.tables.keys())

    if expected.issubset(existing):
        log.info("All tables exist. Skipping creation.")
        return engine

    missing = sorted(expected - existing)
    log.info("Creating tables: %s", ", ".join(missing))
    Base.metadata.create_all(engine)
    log.info("Tables created.")
    return engine
