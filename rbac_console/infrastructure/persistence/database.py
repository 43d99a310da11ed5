"""Persistence: async engine, session factory, unit of work, and Base for SQLAlchemy ORM.

Engine and session factory are created lazily on first use
(get_session_factory) so import does not trigger Settings validation.

Every relational mutation of the authorization core runs inside
unit_of_work(): one session, one transaction, commit on success,
rollback on error. Store failures are translated to domain exceptions
at this boundary so services never see driver errors.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from rbac_console.core.config import get_settings
from rbac_console.domain.exceptions import ConflictException, TransientStoreException

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    connect_args: dict[str, Any] = {}
    engine_kwargs: dict[str, Any] = {"echo": settings.database_echo, "pool_pre_ping": True}
    if "postgresql" in settings.database_url:
        connect_args["command_timeout"] = settings.db_command_timeout
        engine_kwargs["pool_size"] = settings.db_pool_size or 20
        engine_kwargs["max_overflow"] = settings.db_max_overflow or 30
        engine_kwargs["pool_recycle"] = 3600
        engine_kwargs["pool_timeout"] = settings.db_command_timeout
    engine = create_async_engine(
        settings.database_url, connect_args=connect_args, **engine_kwargs
    )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine() -> AsyncEngine:
    """Return the process-wide engine (creating it if needed)."""
    _ensure_engine()
    assert engine is not None
    return engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory (creating the engine if needed)."""
    _ensure_engine()
    assert AsyncSessionLocal is not None
    return AsyncSessionLocal


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _translate_store_error(e: Exception) -> Exception:
    """Map driver/pool errors to domain exceptions (Conflict or Transient)."""
    if isinstance(e, sa_exc.IntegrityError):
        return ConflictException(
            "Write violates a uniqueness constraint",
            {"reason": str(e.orig) if e.orig is not None else str(e)},
        )
    return TransientStoreException("database", str(e))


_TRANSIENT_ERRORS = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.TimeoutError,
    TimeoutError,
    ConnectionError,
)


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Yield a session inside one transaction; commit on exit, roll back on error.

    Raises:
        ConflictException: A unique constraint rejected the write.
        TransientStoreException: The database was unreachable or timed out.
    """
    try:
        async with session_factory() as session:
            async with session.begin():
                yield session
    except sa_exc.IntegrityError as e:
        raise _translate_store_error(e) from e
    except _TRANSIENT_ERRORS as e:
        logger.warning("Relational store unavailable: %s", e)
        raise _translate_store_error(e) from e


@asynccontextmanager
async def read_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Yield a session for reads only (no commit)."""
    try:
        async with session_factory() as session:
            yield session
    except _TRANSIENT_ERRORS as e:
        logger.warning("Relational store unavailable: %s", e)
        raise _translate_store_error(e) from e


async def dispose_engine() -> None:
    """Dispose the engine at shutdown (no-op when never created)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None
