"""Database engine and session management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (  # type: ignore[attr-defined]
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from smart_planogram.enterprise.config.settings import AppSettings, get_settings


class Base(DeclarativeBase):
    pass


metadata = Base.metadata

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


def init_engine(settings: Optional[AppSettings] = None) -> AsyncEngine:
    """Initialise (or return existing) async SQLAlchemy engine."""

    global _engine, _sessionmaker
    if _engine is not None:
        return _engine

    db = (settings or get_settings()).database
    if not db.enabled:
        raise RuntimeError("Database usage is disabled by configuration.")
    _engine = create_async_engine(
        str(db.url),
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
    )
    _sessionmaker = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def create_schema(settings: Optional[AppSettings] = None) -> None:
    """Create the categories/planograms tables if they are missing."""

    engine = init_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


async def dispose_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


@asynccontextmanager
async def get_async_session() -> AsyncIterator[AsyncSession]:
    if _sessionmaker is None:
        init_engine()
    assert _sessionmaker is not None
    async with _sessionmaker() as session:
        yield session
