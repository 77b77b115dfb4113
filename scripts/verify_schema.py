"""
Check that the database has what the service needs:

- the `vector` extension
- the `ai_tasks` and `ai_embeddings` tables with their mapped columns
- the default content table

Usage:
    python scripts/verify_schema.py
"""
import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import inspect, text

from content_ai.config import settings
from content_ai.db import async_engine, Base


def _inspect_tables(sync_conn):
    inspector = inspect(sync_conn)
    tables = set(inspector.get_table_names())
    columns = {
        name: {col["name"] for col in inspector.get_columns(name)}
        for name in tables
    }
    return tables, columns


async def main() -> int:
    problems = []

    async with async_engine.connect() as conn:
        result = await conn.execute(
            text("SELECT extname FROM pg_extension WHERE extname = 'vector'")
        )
        if result.first() is None:
            problems.append("extension 'vector' is not installed")
        else:
            print("ok   extension vector")

        tables, columns = await conn.run_sync(_inspect_tables)

    for table in Base.metadata.sorted_tables:
        if table.name not in tables:
            problems.append(f"table '{table.name}' is missing")
            continue
        missing = {c.name for c in table.columns} - columns[table.name]
        if missing:
            problems.append(f"table '{table.name}' lacks columns: {', '.join(sorted(missing))}")
        else:
            print(f"ok   table {table.name}")

    if settings.default_content_table not in tables:
        problems.append(f"content table '{settings.default_content_table}' is missing")
    else:
        print(f"ok   table {settings.default_content_table}")

    await async_engine.dispose()

    for problem in problems:
        print(f"FAIL {problem}")
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
