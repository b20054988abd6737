# tests/conftest.py

"""
Shared fixtures for the Inventory API tests.
Each test gets its own in-memory SQLite database, so no PostgreSQL server
is needed and no state leaks between tests.
"""

import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from inventory_api.db import Base, build_session_factory
from inventory_api.main import create_app

# Suppress noisy logs from SQLAlchemy/FastAPI during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("inventory_api").setLevel(logging.WARNING)


@pytest.fixture
def engine():
    """
    In-memory SQLite engine. StaticPool keeps a single connection so every
    session (and the TestClient's worker threads) sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """A session on an empty, unseeded products table."""
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(engine):
    app = create_app(engine)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """
    TestClient used as a context manager so the lifespan runs: the schema
    is created and seeded before the first request.
    """
    with TestClient(app) as test_client:
        yield test_client
