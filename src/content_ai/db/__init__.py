"""
Database Package

Provides SQLAlchemy async session management, model definitions and the
stores used by the handlers, for PostgreSQL with pgvector.
"""

from .session import get_async_session, async_engine, AsyncSessionLocal
from .models import Base, EmbeddingChunk, Task
from .vector_store import EmbeddingStore
from .task_store import TaskStore
from .content_repo import ContentRepository

__all__ = [
    "get_async_session",
    "async_engine",
    "AsyncSessionLocal",
    "Base",
    "EmbeddingChunk",
    "Task",
    "EmbeddingStore",
    "TaskStore",
    "ContentRepository",
]
