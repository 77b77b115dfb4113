"""
SQLAlchemy Models

Defines the database schema owned by this service:
- Embedding chunks (vector storage with pgvector)
- AI task records and their lifecycle

Content tables (articles, content_items, ...) are owned elsewhere and are
accessed through `ContentRepository` without a mapped model.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column,
    String,
    Integer,
    Text,
    DateTime,
    Index,
    func,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from pgvector.sqlalchemy import Vector

from ..config import settings


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ---------------------------------------------------------------------
# Embedding Chunk Model
# ---------------------------------------------------------------------

class EmbeddingChunk(Base):
    """
    One embedded window of a content record's text.

    Chunk indices for a given source record are contiguous from 0.
    """
    __tablename__ = "ai_embeddings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    org_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    source_table: Mapped[str] = mapped_column(String(64), nullable=False)
    source_field: Mapped[str] = mapped_column(String(64), nullable=False)
    source_record_id: Mapped[str] = mapped_column(String(64), nullable=False)
    chunk_ix: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # 1536 dimensions for text-embedding-3-small
    embedding = Column(Vector(settings.embedding_dimensions), nullable=False)

    __table_args__ = (
        Index("idx_ai_embeddings_source", "source_record_id", "chunk_ix"),
    )


# ---------------------------------------------------------------------
# Task Model
# ---------------------------------------------------------------------

class Task(Base):
    """
    Durable record of one requested content-analysis operation.
    """
    __tablename__ = "ai_tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    task_type: Mapped[str] = mapped_column(String(32), nullable=False)
    parameters: Mapped[dict] = mapped_column(JSONB, nullable=False)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default="normal")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")  # pending | processing | completed | failed
    results: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        Index("idx_ai_tasks_status", "status", "created_at"),
    )
