"""Pytest configuration and fixtures."""

import logging

import pytest

from plantlog.database.document_store import SqliteDocumentStore
from plantlog.database.sqlite_client import get_engine
from plantlog.utils.logging import APP_LOGGER_NAME


@pytest.fixture
def engine():
    """Create a temporary in-memory database engine with tables created."""
    engine = get_engine(":memory:")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(engine):
    """Document store backed by the in-memory database."""
    return SqliteDocumentStore(engine)


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers configured during a test (they hold captured streams)."""
    yield
    root = logging.getLogger(APP_LOGGER_NAME)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
