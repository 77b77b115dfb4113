"""
Embedding generation for a single content record.

Regenerating a record first deletes every stored chunk for it, then embeds
and inserts the new chunks one at a time in index order. The sequence is not
transactional: if an embedding call or an insert fails, the loop stops and
the chunks inserted so far stay in the store.
"""

from __future__ import annotations

import logging
from typing import Optional

from .chunker import chunk_text
from .embedder import Embedder
from .models import SourceRecord
from ..config import settings
from ..db.vector_store import EmbeddingStore

logger = logging.getLogger("content_ai.embeddings")


class EmbeddingGenerator:
    """
    Produces and persists the embedding set for one content record.
    """

    def __init__(
        self,
        store: EmbeddingStore,
        embedder: Embedder,
        chunk_size: Optional[int] = None,
        chunk_overlap: Optional[int] = None,
        source_table: Optional[str] = None,
        source_field: Optional[str] = None,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.chunk_size = chunk_size or settings.chunk_size
        self.chunk_overlap = settings.chunk_overlap if chunk_overlap is None else chunk_overlap
        self.source_table = source_table or settings.embedding_source_table
        self.source_field = source_field or settings.embedding_source_field

    async def generate(self, record: SourceRecord) -> int:
        """
        Replace the stored embeddings of `record` and return the chunk count.

        Raises
        ------
        EmbeddingError
            If the embeddings API fails for any chunk.
        """
        deleted = await self.store.delete_for_record(record.id)
        if deleted:
            logger.debug("Deleted %d previous chunks for record %s", deleted, record.id)

        chunks = chunk_text(record.body, self.chunk_size, self.chunk_overlap)

        for chunk_ix, chunk in enumerate(chunks):
            vector = await self.embedder.embed_text(chunk)
            await self.store.add_chunk(
                org_id=record.org_id,
                content=chunk,
                embedding=vector,
                source_table=self.source_table,
                source_field=self.source_field,
                source_record_id=record.id,
                chunk_ix=chunk_ix,
            )

        logger.info("Generated %d embeddings for record %s", len(chunks), record.id)
        return len(chunks)
