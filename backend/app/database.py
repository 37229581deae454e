"""
Portfolio Backend — Database Handle and Session Management
============================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   `Database` wraps one engine and one session factory. The application
       factory constructs it from Settings and stores it on `app.state`; the
       `get_db_session` dependency checks a session out of it per request and
       commits on success, rolls back on error.
Who:   Constructed by create_app(); used by route handlers via Depends().

Backend differences handled here, not in services:
    - PostgreSQL (asyncpg): pooled connections with pre-ping and recycling
    - SQLite (aiosqlite): no pool sizing; foreign keys switched on per
      connection so ON DELETE SET NULL behaves like PostgreSQL
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to share a single metadata object,
    which Database.create_all() uses to create missing tables at bootstrap.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Explicitly constructed database handle.

    One instance per application. Services never import an engine; they
    receive an AsyncSession checked out from this handle.

    Example:
        database = Database.from_settings(settings)
        async with database.session() as session:
            await session.execute(select(Photo))
        await database.dispose()
    """

    def __init__(self, url: str, echo: bool = False, **engine_options: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_options)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False: attributes stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        options: Dict[str, Any] = {}
        if not settings.is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, echo=settings.log_level == "DEBUG", **options)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Unit of work: commit on success, roll back on any error, always close.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create missing tables (CREATE TABLE IF NOT EXISTS semantics)."""
        # Models must be imported so their tables register on Base.metadata
        from app.models import category, photo, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Lightweight connectivity check (SELECT 1)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections. Called on application shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The handle comes from `request.app.state.database`, set by create_app().

    Example usage in a route:
        @router.get("/photos")
        async def list_photos(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
