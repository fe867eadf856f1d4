"""SQLite-backed ledger store with an explicit init/close lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from family_ledger.db.models import Base

logger = logging.getLogger(__name__)


def _is_memory_url(database_url: str) -> bool:
    return database_url in {"sqlite://", "sqlite:///:memory:"}


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class LedgerStore:
    """Own the engine and session factory for one database file.

    Construct it once, call :meth:`init` before use and :meth:`close` on
    shutdown, and hand it to whatever needs database access.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.database_url = database_url
        self.echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    def init(self) -> LedgerStore:
        """Create the engine, enable foreign keys and create missing tables."""
        if self._engine is not None:
            return self

        kwargs: dict = {"echo": self.echo}
        if self.database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_url(self.database_url):
                # One shared connection, otherwise every session sees an empty database.
                kwargs["poolclass"] = StaticPool

        engine = create_engine(self.database_url, **kwargs)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_foreign_keys)

        Base.metadata.create_all(engine)
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        logger.info("Ledger store opened at %s", engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        """Dispose of the engine; safe to call more than once."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Ledger store closed")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        if self._session_factory is None:
            raise RuntimeError("LedgerStore is not initialised; call init() first")
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
