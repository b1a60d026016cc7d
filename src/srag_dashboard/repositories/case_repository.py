"""
Storage access for SragCase rows.

Reads open a short-lived connection per call; writes run in their own
transaction so a committed batch survives any later failure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Connection, Engine

from srag_dashboard.models import SragCase

log = logging.getLogger(__name__)

_KEY = "notification_id"
_CONFLICT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


def _columns(fields: Sequence[str] | None):
    if not fields:
        return list(SragCase.__table__.columns)
    return [getattr(SragCase, f) for f in fields]


def _equals(where: Mapping[str, Any] | None) -> list:
    return [getattr(SragCase, f) == v for f, v in (where or {}).items()]


class CaseRepository:
    """
    Repository for the ``srag_cases`` table.

    ``create_many(skip_duplicates=True)`` never overwrites: a record whose
    ``notification_id`` is already stored, or repeats an earlier record of
    the same call, is dropped and not counted as inserted.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def find_many(
        self,
        where: Mapping[str, Any] | None = None,
        select_fields: Sequence[str] | None = None,
        order_by: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Rows matching the equality filters in ``where``, as plain dicts."""
        stmt = select(*_columns(select_fields)).where(*_equals(where))
        if order_by:
            stmt = stmt.order_by(*_columns(order_by))
        with self._engine.connect() as conn:
            return [dict(row) for row in conn.execute(stmt).mappings()]

    def count(self, *criteria) -> int:
        """Number of rows satisfying every SQLAlchemy criterion given."""
        stmt = select(func.count()).select_from(SragCase).where(*criteria)
        with self._engine.connect() as conn:
            return conn.execute(stmt).scalar_one()

    def distinct(
        self,
        *fields: str,
        criteria: Iterable = (),
        order_by: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]:
        cols = _columns(fields)
        stmt = (
            select(*cols)
            .where(*criteria)
            .distinct()
            .order_by(*(_columns(order_by) if order_by else cols))
        )
        with self._engine.connect() as conn:
            return [dict(row) for row in conn.execute(stmt).mappings()]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create_many(self, records: Sequence[Mapping[str, Any]], skip_duplicates: bool = True) -> int:
        """Insert ``records`` in one transaction; returns how many were new."""
        if not records:
            return 0

        with self._engine.begin() as conn:
            if not skip_duplicates:
                conn.execute(insert(SragCase), list(records))
                return len(records)

            fresh = self._unseen(conn, records)
            if fresh:
                conn.execute(self._insert_ignore(conn), fresh)

        skipped = len(records) - len(fresh)
        if skipped:
            log.debug("Skipped %d duplicate notifications", skipped)
        return len(fresh)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _unseen(conn: Connection, records: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
        by_id: dict[str, dict[str, Any]] = {}
        for rec in records:
            by_id.setdefault(rec[_KEY], dict(rec))

        stored = set(
            conn.execute(
                select(SragCase.notification_id).where(SragCase.notification_id.in_(list(by_id)))
            ).scalars()
        )
        return [rec for key, rec in by_id.items() if key not in stored]

    @staticmethod
    def _insert_ignore(conn: Connection):
        dialect_insert = _CONFLICT_INSERTS.get(conn.dialect.name)
        if dialect_insert is None:
            return insert(SragCase)
        return dialect_insert(SragCase).on_conflict_do_nothing(index_elements=[_KEY])
