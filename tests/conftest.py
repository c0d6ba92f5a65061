"""Shared fixtures."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from address_book_service.api.app import create_app
from address_book_service.config.settings import Settings
from address_book_service.repositories.connection import DatabaseManager
from address_book_service.repositories.sqlalchemy_repository import SQLAlchemyAddressRepository


@pytest.fixture
def app_settings(tmp_path):
    """Settings pointing at a throwaway SQLite file and upload directory."""
    return Settings(
        storage_backend="sql",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}",
        upload_dir=tmp_path / "files",
        session_secret="test-secret",
        log_format="text",
    )


@pytest_asyncio.fixture
async def database(app_settings):
    """Initialized database manager, closed after the test."""
    manager = DatabaseManager(app_settings)
    await manager.initialize()
    yield manager
    await manager.close()


@pytest.fixture
def sql_repository(database):
    return SQLAlchemyAddressRepository(database)


@pytest.fixture
def client(app_settings):
    """Test client with the application lifespan running."""
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client
