"""
Database Session Management

One async engine per process and a request-scoped session for the stores.
`ai_tasks`, `ai_embeddings` and the content tables all live in the same
Postgres database, so every store of a request shares one session.
"""

from __future__ import annotations

from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)

from ..config import settings


async_engine = create_async_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

# Stores read back rows they just committed (task ids, chunk indices).
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session for one request.

    The stores commit each write themselves, so nothing is committed here.
    Work left uncommitted when the request raises is rolled back, and the
    session is closed either way.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
