import pytest
from unittest.mock import AsyncMock

from content_ai.db import EmbeddingStore
from content_ai.embeddings.embedder import Embedder, EmbeddingError
from content_ai.embeddings.generator import EmbeddingGenerator
from content_ai.embeddings.models import SourceRecord


class InMemoryEmbeddingStore:
    def __init__(self):
        self.rows = []

    async def delete_for_record(self, source_record_id):
        before = len(self.rows)
        self.rows = [r for r in self.rows if r["source_record_id"] != source_record_id]
        return before - len(self.rows)

    async def add_chunk(self, **row):
        self.rows.append(row)


@pytest.fixture
def mock_store():
    store = AsyncMock(spec=EmbeddingStore)
    store.delete_for_record.return_value = 0
    return store


@pytest.fixture
def mock_embedder():
    embedder = AsyncMock(spec=Embedder)
    embedder.embed_text.return_value = [0.1] * 1536
    return embedder


@pytest.mark.asyncio
async def test_generate_deletes_then_inserts_in_order(mock_store, mock_embedder):
    record = SourceRecord(id="rec-1", org_id="org-9", body="x" * 120)
    generator = EmbeddingGenerator(mock_store, mock_embedder, chunk_size=50, chunk_overlap=10)

    count = await generator.generate(record)

    assert count == 3
    mock_store.delete_for_record.assert_awaited_once_with("rec-1")
    assert mock_embedder.embed_text.await_count == 3

    calls = mock_store.add_chunk.await_args_list
    assert [c.kwargs["chunk_ix"] for c in calls] == [0, 1, 2]
    assert [len(c.kwargs["content"]) for c in calls] == [50, 50, 40]
    for c in calls:
        assert c.kwargs["org_id"] == "org-9"
        assert c.kwargs["source_table"] == "content_items"
        assert c.kwargs["source_field"] == "body"
        assert c.kwargs["source_record_id"] == "rec-1"


@pytest.mark.asyncio
async def test_missing_body_still_clears_old_chunks(mock_store, mock_embedder):
    record = SourceRecord(id="rec-1", org_id="org-9")
    generator = EmbeddingGenerator(mock_store, mock_embedder)

    assert await generator.generate(record) == 0
    mock_store.delete_for_record.assert_awaited_once_with("rec-1")
    mock_embedder.embed_text.assert_not_called()
    mock_store.add_chunk.assert_not_called()


@pytest.mark.asyncio
async def test_embedding_failure_stops_loop_and_keeps_inserted_chunks(mock_store, mock_embedder):
    mock_embedder.embed_text.side_effect = [[0.1], [0.2], EmbeddingError("boom")]
    record = SourceRecord(id="rec-1", org_id="org-9", body="y" * 200)
    generator = EmbeddingGenerator(mock_store, mock_embedder, chunk_size=50, chunk_overlap=10)

    with pytest.raises(EmbeddingError):
        await generator.generate(record)

    assert mock_store.add_chunk.await_count == 2
    mock_store.delete_for_record.assert_awaited_once()


@pytest.mark.asyncio
async def test_regeneration_replaces_previous_generation(mock_embedder):
    store = InMemoryEmbeddingStore()
    store.rows.append({"source_record_id": "other", "chunk_ix": 0})
    record = SourceRecord(id="rec-1", org_id="org-9", body="z" * 1200)
    generator = EmbeddingGenerator(store, mock_embedder)

    first = await generator.generate(record)
    second = await generator.generate(record)

    assert first == second == 3
    mine = [r for r in store.rows if r["source_record_id"] == "rec-1"]
    assert [r["chunk_ix"] for r in mine] == [0, 1, 2]
    assert len(store.rows) == 4


def test_source_record_accepts_numeric_ids_and_null_body():
    record = SourceRecord.model_validate({"id": 42, "org_id": 7, "body": None, "status": "draft"})
    assert record.id == "42"
    assert record.org_id == "7"
    assert record.body == ""
