from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import Settings, get_settings


class Database:
    """
    Owner of the AsyncEngine and session factory for one application instance.

    The engine is created lazily on first use so that building the application
    does not require a reachable database.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Return the AsyncEngine, creating it on first access."""
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.async_database_url,
                echo=self.settings.SQL_ECHO,
                pool_pre_ping=True,
            )
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                bind=self.engine, expire_on_commit=False, autoflush=False
            )
        return self._session_maker

    # PUBLIC_INTERFACE
    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session; uncommitted work is rolled back when the block exits."""
        async with self.session_maker() as session:
            yield session

    # PUBLIC_INTERFACE
    async def dispose(self) -> None:
        """Close pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None


# PUBLIC_INTERFACE
async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession suitable for FastAPI dependency injection.

    The Database instance is attached to ``app.state.db`` by create_app().
    """
    db: Database = request.app.state.db
    async with db.session() as session:
        yield session
