"""
Embedding Store

PostgreSQL + pgvector storage for content embedding chunks.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import EmbeddingChunk


class EmbeddingStore:
    """
    PostgreSQL-backed store for `ai_embeddings` rows.

    Every mutating call commits immediately. Regeneration is delete-then-insert
    and deliberately not wrapped in one transaction: chunks inserted before a
    failure stay in place.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize with an async database session.

        Parameters
        ----------
        session : AsyncSession
            SQLAlchemy async session for database operations.
        """
        self._session = session

    async def delete_for_record(self, source_record_id: str) -> int:
        """
        Remove all embedding chunks generated from a source record.

        Returns the number of deleted rows.
        """
        stmt = delete(EmbeddingChunk).where(
            EmbeddingChunk.source_record_id == str(source_record_id),
        )
        try:
            result = await self._session.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise
        return result.rowcount

    async def add_chunk(
        self,
        org_id: str,
        content: str,
        embedding: List[float],
        source_table: str,
        source_field: str,
        source_record_id: str,
        chunk_ix: int,
    ) -> None:
        """
        Insert a single embedding chunk and commit it.

        Parameters
        ----------
        org_id : str
            Owning organization of the source record.
        content : str
            Chunk text.
        embedding : List[float]
            Vector returned by the embeddings API for `content`.
        source_table, source_field : str
            Where the chunked text came from.
        source_record_id : str
            Identifier of the source record.
        chunk_ix : int
            Zero-based position of the chunk within the record.
        """
        self._session.add(
            EmbeddingChunk(
                org_id=str(org_id),
                content=content,
                embedding=embedding,
                source_table=source_table,
                source_field=source_field,
                source_record_id=str(source_record_id),
                chunk_ix=chunk_ix,
            )
        )
        try:
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise

    async def chunk_indices(self, source_record_id: str) -> List[int]:
        """
        Return the stored chunk indices for a source record, ascending.
        """
        stmt = (
            select(EmbeddingChunk.chunk_ix)
            .where(EmbeddingChunk.source_record_id == str(source_record_id))
            .order_by(EmbeddingChunk.chunk_ix)
        )
        result = await self._session.execute(stmt)
        return [row[0] for row in result.all()]
