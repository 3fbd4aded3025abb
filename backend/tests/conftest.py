"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite database and storage root under tmp_path.
The API client swaps the app's session and file store dependencies for
ones bound to those.
"""

import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Point the process-wide settings at throwaway locations before the app is imported
_session_dir = tempfile.mkdtemp(prefix="file-manager-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_session_dir}/app.db"
os.environ["FILE_STORAGE_PATH"] = str(Path(_session_dir) / "uploads")

from file_manager.database import get_db
from file_manager.main import app
from file_manager.models import Base
from file_manager.services.file_store import FileStoreConfig, FileStoreManager, get_file_store

ALLOWED_TYPES = frozenset({"application/pdf", "image/png", "text/plain"})
MAX_SIZE = 10 * 1024 * 1024


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    """Storage root that does not exist yet; the store creates it."""
    return tmp_path / "uploads"


@pytest.fixture
def store_config(storage_root: Path) -> FileStoreConfig:
    return FileStoreConfig(
        storage_root=str(storage_root),
        max_size_bytes=MAX_SIZE,
        allowed_types=ALLOWED_TYPES,
    )


@pytest_asyncio.fixture
async def db_engine(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def file_store(store_config, db_session) -> FileStoreManager:
    return FileStoreManager(store_config, db_session)


@pytest_asyncio.fixture
async def client(session_factory, store_config) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, bound to the per-test database and storage root."""

    async def _get_db():
        async with session_factory() as session:
            yield session

    def _get_file_store(db: AsyncSession = Depends(get_db)):
        return FileStoreManager(store_config, db)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_file_store] = _get_file_store
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
