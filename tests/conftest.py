"""Pytest fixtures for backend tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from family_ledger.bridge import Bridge
from family_ledger.config import Settings
from family_ledger.db.store import LedgerStore
from family_ledger.main import create_app
from family_ledger.services.category_service import CategoryCatalog


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a throwaway in-memory database."""
    return Settings(database_url="sqlite://", member_scope="global", categories_file=None)


@pytest.fixture
def store(settings: Settings) -> Iterator[LedgerStore]:
    """An initialised in-memory ledger store."""
    ledger_store = LedgerStore(settings.database_url).init()
    yield ledger_store
    ledger_store.close()


@pytest.fixture
def session(store: LedgerStore) -> Iterator[Session]:
    """A session committed when the test finishes."""
    with store.session() as db_session:
        yield db_session


@pytest.fixture
def catalog() -> CategoryCatalog:
    """A category catalog holding only the defaults."""
    return CategoryCatalog()


@pytest.fixture
def bridge(store: LedgerStore, settings: Settings, catalog: CategoryCatalog) -> Bridge:
    """A bridge dispatching to the in-memory store."""
    return Bridge(store, settings, catalog)


@pytest.fixture
def client(settings: Settings, catalog: CategoryCatalog) -> Iterator[TestClient]:
    """Create a FastAPI test client over a fresh in-memory store."""
    app = create_app(settings, LedgerStore(settings.database_url), catalog)
    with TestClient(app) as test_client:
        yield test_client
