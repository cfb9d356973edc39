"""Async engine helpers for the order ledger database.

The DSN comes from the ``ledger_database_url`` setting, for example::

    sqlite+aiosqlite:///./ledger.db
    postgresql+asyncpg://u:p@host:5432/ledger

Use :func:`get_engine` to build an :class:`~sqlalchemy.ext.asyncio.AsyncEngine`
and :func:`create_schema` to create the ledger tables on it.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..obs import add_query_logger

from ..models_ledger import Base


def get_engine(dsn: str) -> AsyncEngine:
    """Create and return an :class:`AsyncEngine` for ``dsn``."""

    engine = create_async_engine(dsn)
    add_query_logger(engine, "ledger")
    return engine


def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all ledger tables that do not exist yet."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = ["get_engine", "session_factory", "create_schema"]
