"""
Contact Inbox Test Configuration and Fixtures
Shared pytest fixtures for all test modules.
"""
import os
import tempfile
from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from backend.core.config import settings
from backend.main import app
from backend.models import Base
from backend.storage import InsertResult, MongoSubmissionStore, SqlSubmissionStore, SubmissionStore

ADMIN_SECRET = "test-admin-secret-2026"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an async SQLite engine for testing."""
    # Use a unique temp file for each test to ensure complete isolation
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()

    try:
        os.unlink(db_path)
    except OSError:
        pass


@pytest_asyncio.fixture(scope="function")
async def sql_store(async_engine) -> SqlSubmissionStore:
    """Relational store on the temporary SQLite database."""
    return SqlSubmissionStore(async_engine)


@pytest.fixture
def unreachable_engine(tmp_path) -> AsyncEngine:
    """Engine pointing at a database file whose directory does not exist."""
    missing = tmp_path / "missing" / "contact.db"
    return create_async_engine(f"sqlite+aiosqlite:///{missing}")


# =============================================================================
# Document Store Mocks
# =============================================================================


@pytest.fixture
def mongo_collection():
    """Mock pymongo async collection."""
    collection = MagicMock()
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.create_index = AsyncMock(return_value="created_at_desc")
    collection.find.return_value.sort.return_value.to_list = AsyncMock(return_value=[])
    return collection


@pytest.fixture
def mongo_client(mongo_collection):
    """Mock AsyncMongoClient whose client[db][collection] is mongo_collection."""
    client = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = mongo_collection
    client.admin.command = AsyncMock(return_value={"ok": 1.0})
    client.close = AsyncMock()
    return client


@pytest.fixture
def mongo_store(mongo_client) -> MongoSubmissionStore:
    return MongoSubmissionStore(mongo_client, "contacto_test", "mensajes")


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def mock_store():
    """Store double that records calls without touching a database."""
    store = MagicMock(spec=SubmissionStore)
    store.name = "mock"
    store.field_limits = {}
    store.insert = AsyncMock(
        return_value=InsertResult(id=1, created_at=datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))
    )
    store.list_all = AsyncMock(return_value=[])
    store.ping = AsyncMock(return_value=None)
    store.close = AsyncMock()
    return store


@pytest.fixture
def admin_secret(monkeypatch) -> str:
    """Configure the admin shared secret for the duration of a test."""
    monkeypatch.setattr(settings, "admin_secret", ADMIN_SECRET)
    return ADMIN_SECRET


@pytest.fixture
def install_store():
    """Install a store on the app the way the lifespan handler does."""

    def _install(store):
        app.state.store = store
        return store

    yield _install
    app.state.store = None


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the ASGI app (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def valid_payload() -> dict[str, str]:
    """Contact form body as the original browser form sends it."""
    return {
        "nombre": "Ana",
        "email": "ana@x.com",
        "mensaje": "Hola, este es un mensaje de prueba",
    }
