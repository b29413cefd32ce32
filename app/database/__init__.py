"""
Database Module

Async engine, session factory and the request unit of work.
"""

from app.database.async_db import (
    AsyncSessionLocal,
    async_engine,
    get_async_db,
    get_async_db_context,
    get_outbox,
)

__all__ = [
    "AsyncSessionLocal",
    "async_engine",
    "get_async_db",
    "get_async_db_context",
    "get_outbox",
]
