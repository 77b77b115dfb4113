"""
Task Store

Persistence of `ai_tasks` rows and enforcement of the task lifecycle:

    pending -> processing -> completed | failed

Each transition is a conditional UPDATE guarded by the expected source
state and is committed immediately, so a task that fails mid-operation is
still observable as `processing` and then `failed`.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Task
from ..core.errors import InvalidTaskTransition
from ..tasks.models import TaskStatus

logger = logging.getLogger("content_ai.tasks.store")


class TaskStore:
    """
    PostgreSQL-backed store for task records.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        task_type: str,
        parameters: Dict[str, Any],
        priority: str = "normal",
    ) -> str:
        """
        Insert a new task in `pending` and return its identifier.
        """
        task = Task(
            id=uuid.uuid4(),
            task_type=task_type,
            parameters=parameters,
            priority=priority,
            status=TaskStatus.PENDING.value,
        )
        self._session.add(task)
        await self._commit()
        logger.info("Created task %s (%s, priority=%s)", task.id, task_type, priority)
        return str(task.id)

    async def mark_processing(self, task_id: str) -> None:
        await self._transition(task_id, TaskStatus.PENDING, TaskStatus.PROCESSING)

    async def mark_completed(self, task_id: str, results: Dict[str, Any]) -> None:
        await self._transition(
            task_id,
            TaskStatus.PROCESSING,
            TaskStatus.COMPLETED,
            results=results,
        )

    async def mark_failed(self, task_id: str, error_message: str) -> None:
        await self._transition(
            task_id,
            TaskStatus.PROCESSING,
            TaskStatus.FAILED,
            error_message=error_message,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _transition(
        self,
        task_id: str,
        expected: TaskStatus,
        target: TaskStatus,
        results: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> None:
        """
        Move a task from `expected` to `target`.

        Raises
        ------
        InvalidTaskTransition
            If the task does not exist or is not in `expected`.
        """
        if target not in expected.allowed_next():
            raise InvalidTaskTransition(
                f"Task status cannot change from {expected.value} to {target.value}"
            )

        values: Dict[str, Any] = {
            "status": target.value,
            "updated_at": func.now(),
        }
        if results is not None:
            values["results"] = results
        if error_message is not None:
            values["error_message"] = error_message

        stmt = (
            update(Task)
            .where(Task.id == uuid.UUID(str(task_id)), Task.status == expected.value)
            .values(**values)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError:
            await self._session.rollback()
            raise
        await self._commit()

        if result.rowcount != 1:
            raise InvalidTaskTransition(
                f"Task {task_id} is not {expected.value}; cannot move to {target.value}"
            )

        logger.debug("Task %s: %s -> %s", task_id, expected.value, target.value)

    async def _commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise
