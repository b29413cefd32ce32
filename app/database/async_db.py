"""
Async database engine and the request-scoped unit of work.

One `AsyncSession` per request. Repositories only `flush()`; the session
dependency commits once after the handler returns and then publishes the
domain events buffered in the session outbox. On any exception the
transaction is rolled back, the outbox discarded and the error re-raised.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from urllib.parse import quote_plus

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # type: ignore[attr-defined]
from sqlalchemy.pool import NullPool

from app.config.settings import get_settings
from app.core.domain.events import EventOutbox

logger = logging.getLogger(__name__)

settings = get_settings()

OUTBOX_KEY = "outbox"


def get_async_database_url() -> str:
    """Build the asyncpg database URL from settings."""
    host = settings.DB_HOST or "localhost"
    port = settings.DB_PORT or 5432
    user = settings.DB_USER or "postgres"
    database = settings.DB_NAME
    password = settings.DB_PASSWORD

    if not database:
        raise ValueError("Database name is required (DB_NAME)")

    encoded_user = quote_plus(user)

    if password:
        encoded_password = quote_plus(password)
        return f"postgresql+asyncpg://{encoded_user}:{encoded_password}@{host}:{port}/{database}"
    return f"postgresql+asyncpg://{encoded_user}@{host}:{port}/{database}"


def create_async_database_engine():
    """Create the async engine (NullPool in debug, sized pool otherwise)."""
    try:
        database_url = get_async_database_url()

        base_config = {
            "echo": settings.DB_ECHO,
            "future": True,
            "pool_pre_ping": True,
        }

        if settings.DEBUG:
            logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
            engine_config = {
                **base_config,
                "poolclass": NullPool,
            }
        else:
            logger.info("Creating async database engine for PRODUCTION (pooled)")
            engine_config = {
                **base_config,
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_recycle": settings.DB_POOL_RECYCLE,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
            }

        return create_async_engine(database_url, **engine_config)

    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


async_engine = create_async_database_engine()

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


def get_outbox(session: AsyncSession) -> EventOutbox:
    """Return the event outbox bound to a session, creating it on first use."""
    outbox = session.info.get(OUTBOX_KEY)
    if outbox is None:
        outbox = EventOutbox()
        session.info[OUTBOX_KEY] = outbox
    return outbox


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding the request session.

    Commits after the handler, then publishes pending domain events.
    """
    async with AsyncSessionLocal() as session:
        outbox = get_outbox(session)
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            outbox.discard()
            raise
        await outbox.flush()


@asynccontextmanager
async def get_async_db_context():
    """
    Context manager with the same unit-of-work semantics, for scripts and
    background jobs.
    """
    async with AsyncSessionLocal() as session:
        outbox = get_outbox(session)
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            outbox.discard()
            raise
        await outbox.flush()
