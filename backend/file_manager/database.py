"""Async SQLAlchemy engine and session factory.

Each request gets its own AsyncSession through get_db; routes never use it
directly but receive a FileStoreManager bound to it (see
services/file_store.get_file_store). Outside a request, open one with
`async with async_session() as db:`.
"""
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from file_manager.config import settings

_engine_options = {"echo": settings.DATABASE_ECHO, "pool_pre_ping": True}
if not settings.DATABASE_URL.startswith("sqlite"):
    _engine_options.update(pool_size=10, max_overflow=20)

engine = create_async_engine(settings.DATABASE_URL, **_engine_options)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """FastAPI dependency that yields an async DB session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
