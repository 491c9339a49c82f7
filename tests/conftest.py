"""
Test configuration and fixtures for FastAPI URL shortener.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from shortener_app.cache.strategies import InMemoryCache
from shortener_app.database.connection import build_engine
from shortener_app.dependencies import get_cache, get_storage
from shortener_app.services.url_service import URLService
from shortener_app.storage.strategies import InMemoryMappingStorage, SQLAlchemyMappingStorage


@pytest.fixture(scope="function")
def sqlite_storage(tmp_path):
    """
    SQLAlchemy storage on a fresh SQLite file for each test.
    A file (not :memory:) so that threads share one database.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    storage = SQLAlchemyMappingStorage(engine)
    storage.init_schema()

    try:
        yield storage
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def memory_storage():
    return InMemoryMappingStorage()


@pytest.fixture(scope="function")
def url_service(sqlite_storage):
    """Service with the real entropy source and the minimum retry budget."""
    return URLService(sqlite_storage, exists_retry=1)


@pytest.fixture(scope="function")
def client(sqlite_storage):
    """
    Create a test client with storage and cache dependencies overridden.
    This is the main fixture that API tests will use.
    """
    cache = InMemoryCache()
    app.dependency_overrides[get_storage] = lambda: sqlite_storage
    app.dependency_overrides[get_cache] = lambda: cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
