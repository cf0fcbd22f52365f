"""
Record Intake Service — Database Engine & Sessions
====================================================

What:  Builds the async SQLAlchemy engine and session factory from Settings.
How:   `build_engine()` is called once by `create_app()`; the resulting
       session factory is handed to `RecordStore`. Nothing here is created
       at import time.

Connection Pooling:
    pool_size / max_overflow come from Settings for server databases.
    SQLite (local development and tests) keeps SQLAlchemy's default pool.
    pool_recycle=3600 recycles connections every hour.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from intake.config import Settings


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata is what Alembic tracks."""
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    SQL echo is enabled only at DEBUG log level.
    """
    options: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory shared by all requests.

    expire_on_commit=False keeps attributes readable after commit, so a
    created record can be serialized without another round trip.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables registered on Base.metadata."""
    # Model modules register their tables on import.
    from intake.models import record  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
