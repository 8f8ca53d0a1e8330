"""
Database connection management
"""

import os
import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

# Shared connection pool for the process
_async_engine: AsyncEngine | None = None
_async_session_local: async_sessionmaker[AsyncSession] | None = None
_initialized = False
_init_lock = threading.Lock()


def get_database_url() -> str:
    """Get database URL, checking the environment first for test compatibility."""
    return os.getenv("ASPIRE_DATABASE_URL") or settings.database_url


def to_async_url(database_url: str) -> str:
    """Rewrite a plain database URL to use an asyncio driver.

    ``postgresql://`` becomes ``postgresql+asyncpg://`` and ``sqlite://``
    becomes ``sqlite+aiosqlite://``. URLs that already name a driver are
    returned unchanged.
    """
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def _is_memory_sqlite(async_url: str) -> bool:
    return async_url.startswith("sqlite") and (
        ":memory:" in async_url or async_url.rstrip("/").endswith("sqlite+aiosqlite:")
    )


def create_engine_for_url(database_url: str) -> AsyncEngine:
    """Create an async engine with pool settings appropriate for the backend."""
    async_url = to_async_url(database_url)

    if async_url.startswith("sqlite"):
        # In-memory databases live inside a single connection, so share it
        if _is_memory_sqlite(async_url):
            return create_async_engine(
                async_url,
                echo=settings.sql_echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_async_engine(async_url, echo=settings.sql_echo)

    return create_async_engine(
        async_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.sql_echo,
    )


def reset_database() -> None:
    """Forget the shared engine (for tests)."""
    global _async_engine, _async_session_local, _initialized
    _async_engine = None
    _async_session_local = None
    _initialized = False


async def test_database_connection() -> tuple[bool, str | None]:
    """Run ``SELECT 1`` and return ``(ok, error_message)``."""
    if _async_engine is None:
        return False, "Database engine not initialized"

    try:
        async with _async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, SQLAlchemyError) as e:
        return False, f"Database connection error ({type(e).__name__}): {e}"
    return True, None


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Initialize the shared async engine and session factory.

    Thread-safe: concurrent callers initialize the pool only once.
    """
    global _async_engine, _async_session_local, _initialized

    if _initialized and not force_reinit and database_url is None:
        return

    with _init_lock:
        if _initialized and not force_reinit and database_url is None:
            return

        db_url = database_url or get_database_url()

        _async_engine = create_engine_for_url(db_url)
        _async_session_local = async_sessionmaker(
            _async_engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

        _initialized = True
        logger.info("Database initialized", database_url=_redact_url(db_url))


def _redact_url(database_url: str) -> str:
    """Hide the password component of a database URL for logging."""
    scheme, sep, rest = database_url.partition("://")
    if not sep or "@" not in rest:
        return database_url
    credentials, _, host = rest.rpartition("@")
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"


def get_async_engine() -> AsyncEngine:
    """Get the shared async SQLAlchemy engine."""
    if _async_engine is None:
        init_database()
    if _async_engine is None:
        raise RuntimeError("Database not initialized")
    return _async_engine


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session from the shared pool.

    The session is one unit of work: it commits when the block exits
    normally and rolls back if the block raises.
    """
    if _async_session_local is None:
        init_database()

    if _async_session_local is None:
        raise RuntimeError("Database not initialized")

    async with _async_session_local() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all_tables() -> None:
    """Create every table from ORM metadata (development and tests)."""
    from ..dbmodels import Base

    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all_tables() -> None:
    """Drop every table known to the ORM metadata."""
    from ..dbmodels import Base

    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_database() -> None:
    """Close pooled connections and forget the shared engine."""
    if _async_engine is not None:
        await _async_engine.dispose()
    reset_database()
