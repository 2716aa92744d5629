import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Persistence handle with an explicit connect/disconnect lifecycle.

    One instance is created at startup and passed to everything that needs
    the store (services, scripts, tests) instead of living at module level.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    async def connect(self) -> None:
        """Create the engine and session factory, then create missing tables."""
        if self._engine is not None:
            return

        # Import models to ensure they are registered with SQLAlchemy
        from leaderboard.db import models  # noqa: F401

        self._engine = create_async_engine(
            self.url,
            echo=self.echo,
            pool_pre_ping=True,
            poolclass=NullPool,
        )
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Connected to database %s", self._engine.url.render_as_string(hide_password=True))

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session on the connected engine, closed when the block exits.

        Raises:
            RuntimeError: If called before ``connect()``
        """
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        async with self._session_factory() as session:
            try:
                yield session
            finally:
                await session.close()


__all__ = ["Base", "Database", "AsyncSession"]
