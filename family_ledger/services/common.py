"""Shared SQLAlchemy data access helpers."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from family_ledger.config import settings
from family_ledger.utils.errors import ConflictError, NotFoundError, StorageError

logger = logging.getLogger(__name__)


def _serialize(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def row_to_dict(obj: Any) -> dict[str, Any]:
    """Convert an ORM instance into a plain JSON-friendly dict."""
    return {column.name: _serialize(getattr(obj, column.name)) for column in obj.__table__.columns}


def mutation_result(changes: int) -> dict[str, Any]:
    """Return the ``{success, changes}`` shape reported by update/delete calls."""
    return {"success": changes > 0, "changes": changes}


class SqlService:
    """Thin helper wrapper around a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def execute(self, statement) -> Any:
        """Execute a statement and normalize database errors."""
        started = time.perf_counter()
        try:
            result = self.session.execute(statement)
        except IntegrityError as exc:
            raise ConflictError(
                f"Integrity constraint violated: {exc.orig}", code="INTEGRITY_ERROR"
            ) from exc
        except SQLAlchemyError as exc:
            raise StorageError(str(getattr(exc, "orig", None) or exc)) from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        threshold_ms = settings.slow_query_log_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning("Slow query %.1fms", elapsed_ms)
        return result

    @staticmethod
    def _where(statement, model, filters: dict[str, Any] | None):
        if filters:
            for key, value in filters.items():
                statement = statement.where(getattr(model, key) == value)
        return statement

    def select_one(
        self,
        model,
        filters: dict[str, Any],
        not_found_label: str | None = None,
    ) -> dict[str, Any]:
        """Select a single row and raise NotFoundError when missing."""
        statement = self._where(select(model), model, filters).limit(1)
        obj = self.execute(statement).scalars().first()
        if obj is None:
            raise NotFoundError(not_found_label or model.__tablename__)
        return row_to_dict(obj)

    def select_many(
        self,
        model,
        filters: dict[str, Any] | None = None,
        order_by: Sequence[Any] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select many rows from a table with optional filters and paging."""
        statement = self._where(select(model), model, filters)
        if order_by:
            statement = statement.order_by(*order_by)
        if offset:
            statement = statement.offset(offset)
        if limit:
            statement = statement.limit(limit)
        return [row_to_dict(obj) for obj in self.execute(statement).scalars()]

    def count(self, model, filters: dict[str, Any] | None = None) -> int:
        """Count rows in a table with optional equality filters."""
        statement = self._where(select(func.count()).select_from(model), model, filters)
        return int(self.execute(statement).scalar_one())

    def insert_one(self, model, payload: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return the created object."""
        obj = model(**payload)
        self.session.add(obj)
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                f"Integrity constraint violated: {exc.orig}", code="INTEGRITY_ERROR"
            ) from exc
        except SQLAlchemyError as exc:
            raise StorageError(str(getattr(exc, "orig", None) or exc)) from exc
        return row_to_dict(obj)

    def assign(self, model, filters: dict[str, Any], values: dict[str, Any]) -> int:
        """Write ``values`` verbatim to matching rows; ``None`` clears a column.

        Returns the number of matched rows.
        """
        statement = self._where(update(model), model, filters).values(**values)
        changed = int(self.execute(statement.execution_options(synchronize_session=False)).rowcount)
        # Bulk writes bypass the identity map.
        self.session.expire_all()
        return changed

    def update(self, model, filters: dict[str, Any], payload: dict[str, Any]) -> int:
        """Update rows by equality filters; ``None`` values keep the stored value.

        Returns the number of matched rows.
        """
        values = {key: value for key, value in payload.items() if value is not None}
        if not values:
            return self.count(model, filters)
        return self.assign(model, filters, values)

    def delete(self, model, filters: dict[str, Any]) -> int:
        """Delete rows by equality filters and return the number removed."""
        statement = self._where(delete(model), model, filters)
        removed = int(self.execute(statement.execution_options(synchronize_session=False)).rowcount)
        # Cascades and SET NULL happen in SQLite, not in the session.
        self.session.expire_all()
        return removed


def with_member_name(rows: Iterable[Any]) -> list[dict[str, Any]]:
    """Flatten ``(entity, member_name)`` result rows into dicts."""
    payload: list[dict[str, Any]] = []
    for entity, member_name in rows:
        item = row_to_dict(entity)
        item["member_name"] = member_name
        payload.append(item)
    return payload
