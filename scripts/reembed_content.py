"""
Regenerate embeddings for rows of the content table.

Runs each row through the same generator the /generate-embeddings endpoint
uses and checks that the stored chunk indices are contiguous afterwards.

Usage:
    python scripts/reembed_content.py [--limit N] [--id RECORD_ID ...]
"""
import argparse
import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from pydantic import ValidationError

from content_ai.config import settings
from content_ai.db import AsyncSessionLocal, async_engine, ContentRepository, EmbeddingStore
from content_ai.embeddings.embedder import Embedder
from content_ai.embeddings.generator import EmbeddingGenerator
from content_ai.embeddings.models import SourceRecord


async def main(args) -> int:
    embedder = Embedder()
    table_name = settings.embedding_source_table
    failures = 0

    async with AsyncSessionLocal() as session:
        repo = ContentRepository(session)
        if args.ids:
            rows = await repo.fetch_by_ids(table_name, args.ids)
        else:
            rows = await repo.fetch_filtered(table_name, limit=args.limit)

    print(f"Found {len(rows)} rows in {table_name}.")

    for i, row in enumerate(rows):
        try:
            record = SourceRecord.model_validate(row)
        except ValidationError as e:
            failures += 1
            print(f"({i+1}/{len(rows)}) {row.get('id')}: skipped, {e.error_count()} invalid fields")
            continue

        # one session per record, like a request to the endpoint
        async with AsyncSessionLocal() as session:
            store = EmbeddingStore(session)
            generator = EmbeddingGenerator(store, embedder)
            try:
                count = await generator.generate(record)
            except Exception as e:
                failures += 1
                print(f"({i+1}/{len(rows)}) {record.id}: FAILED {e}")
                continue

            indices = await store.chunk_indices(record.id)
            if indices != list(range(count)):
                failures += 1
                print(f"({i+1}/{len(rows)}) {record.id}: stored indices {indices} != 0..{count - 1}")
            else:
                print(f"({i+1}/{len(rows)}) {record.id}: {count} chunks")

    await async_engine.dispose()
    print("Done." if not failures else f"Done with {failures} failures.")
    return 1 if failures else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--id", dest="ids", action="append", default=[])
    sys.exit(asyncio.run(main(parser.parse_args())))
