"""
CapTrack - Database Configuration

This module handles database connection setup using SQLAlchemy 2.0 async.

The engine and session factory live on a ``Database`` handle that the
application constructs during startup and stores on ``app.state``; request
handlers obtain sessions through the ``get_async_session`` dependency.
"""

from typing import Any, AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from captrack.config import Settings


# Naming convention for constraints (helps with migrations)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    metadata = MetaData(naming_convention=convention)


class Database:
    """
    Owns the async engine and session factory.

    Create one per process (or per test), call ``create_all`` if tables are
    needed, and ``dispose`` on shutdown.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle from application settings."""
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not settings.database_url_async.startswith("sqlite"):
            engine_kwargs["pool_size"] = settings.db_pool_size
            engine_kwargs["max_overflow"] = settings.db_max_overflow
        return cls(settings.database_url_async, echo=settings.debug, **engine_kwargs)

    def session(self) -> AsyncSession:
        """Open a new session; use as an async context manager."""
        return self.session_factory()

    async def create_all(self) -> None:
        """
        Create all tables.
        Use this for development/testing only.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Close database connections."""
        await self.engine.dispose()


def get_database(request: Request) -> Optional[Database]:
    return getattr(request.app.state, "database", None)


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database session.
    Use with FastAPI's Depends().
    """
    database = get_database(request)
    if database is None:
        raise RuntimeError("Database handle is not initialised on app.state")
    async with database.session() as session:
        try:
            yield session
        finally:
            await session.close()


# Alias used by routers
get_db = get_async_session
