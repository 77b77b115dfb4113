import os

# Settings are read at import time; give the app a key before it is imported.
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

import uuid
from typing import Any, Dict, List, Optional, Sequence

import pytest

from content_ai.core.errors import InvalidTaskTransition
from content_ai.tasks.models import TaskStatus


class FakeTaskStore:
    """In-memory task store that keeps the status history of every task."""

    def __init__(self) -> None:
        self.tasks: Dict[str, Dict[str, Any]] = {}
        self.history: Dict[str, List[str]] = {}

    async def create(self, task_type: str, parameters: Dict[str, Any], priority: str = "normal") -> str:
        task_id = str(uuid.uuid4())
        self.tasks[task_id] = {
            "task_type": task_type,
            "parameters": parameters,
            "priority": priority,
            "status": TaskStatus.PENDING.value,
            "results": None,
            "error_message": None,
        }
        self.history[task_id] = [TaskStatus.PENDING.value]
        return task_id

    async def _move(self, task_id: str, expected: TaskStatus, target: TaskStatus, **values) -> None:
        task = self.tasks[task_id]
        if task["status"] != expected.value:
            raise InvalidTaskTransition(f"{task['status']} -> {target.value}")
        task["status"] = target.value
        task.update(values)
        self.history[task_id].append(target.value)

    async def mark_processing(self, task_id: str) -> None:
        await self._move(task_id, TaskStatus.PENDING, TaskStatus.PROCESSING)

    async def mark_completed(self, task_id: str, results: Dict[str, Any]) -> None:
        await self._move(task_id, TaskStatus.PROCESSING, TaskStatus.COMPLETED, results=results)

    async def mark_failed(self, task_id: str, error_message: str) -> None:
        await self._move(task_id, TaskStatus.PROCESSING, TaskStatus.FAILED, error_message=error_message)


class FakeContentRepository:
    """Serves records from in-memory tables and records every query."""

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> None:
        self.tables = tables or {}
        self.queries: List[Dict[str, Any]] = []

    async def fetch_filtered(self, table_name, equals=None, published_from=None, published_to=None, limit=None):
        self.queries.append({
            "table": table_name,
            "equals": equals,
            "published_from": published_from,
            "published_to": published_to,
            "limit": limit,
        })
        rows = [
            r for r in self.tables.get(table_name, [])
            if all(r.get(k) == v for k, v in (equals or {}).items())
        ]
        return rows[:limit] if limit else rows

    async def fetch_by_ids(self, table_name: str, record_ids: Sequence[Any]):
        self.queries.append({"table": table_name, "ids": list(record_ids)})
        by_id = {str(r["id"]): r for r in self.tables.get(table_name, [])}
        return [by_id[str(i)] for i in record_ids if str(i) in by_id]


class ScriptedLLM:
    """
    Completion client whose reply is chosen by a callable over the user prompt.
    Raising from the callable simulates an API failure.
    """

    def __init__(self, reply) -> None:
        self.reply = reply
        self.calls: List[List[Dict[str, str]]] = []

    async def chat(self, messages, temperature=None) -> str:
        self.calls.append(messages)
        return self.reply(messages[-1]["content"])


@pytest.fixture
def task_store():
    return FakeTaskStore()


@pytest.fixture
def content_repo():
    return FakeContentRepository({
        "articles": [
            {"id": 1, "title": "Solar farms", "body": "Solar output doubled.", "status": "published"},
            {"id": 2, "title": "Draft", "body": "Unfinished.", "status": "draft"},
        ],
        "content_items": [
            {"id": "a", "title": "School meals", "body": "Free meals for all pupils.", "category": "Education"},
            {"id": "b", "title": "Clinic opens", "body": "A new clinic opened downtown.", "category": "Health"},
            {"id": "c", "title": "Empty", "body": None, "category": "Health"},
        ],
    })
