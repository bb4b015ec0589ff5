"""Embedded SQLite store: declarative base, engine lifecycle and session dependency."""

import logging
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all models."""


class Database:
    """Owns the async engine and session factory for one database URL.

    Created at application startup and disposed at shutdown; request
    handlers receive sessions through ``get_db`` rather than a module
    level engine.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected. Call connect() first.")
        return self._engine

    async def connect(self) -> None:
        """Open the engine and create any missing tables."""
        if self._engine is not None:
            return

        self._ensure_sqlite_file()
        self._engine = create_async_engine(self.url, echo=self.echo)
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        # Import models so their tables are registered on Base.metadata
        from patientmock import models  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Connected to database %s", make_url(self.url).render_as_string(hide_password=True))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        logger.info("Closed the database connection")

    def session(self) -> AsyncSession:
        """Create a new session bound to this database."""
        if self._session_maker is None:
            raise RuntimeError("Database is not connected. Call connect() first.")
        return self._session_maker()

    def _ensure_sqlite_file(self) -> None:
        """Create the parent directory of a file-backed SQLite database."""
        url = make_url(self.url)
        if not url.drivername.startswith("sqlite"):
            return
        if not url.database or url.database == ":memory:":
            return
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield a session from the application's database.

    Services commit their own writes; anything left pending when a
    request fails is rolled back here.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
