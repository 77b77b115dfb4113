"""
Task Dispatcher

Validates a task request, records the task, runs the matching operation and
writes back the outcome.

Lifecycle
---------
1. Validate the request; rejected requests never create a task.
2. Insert the task as `pending`.
3. Move it to `processing` before any external call.
4. Run the operation for its `TaskType`.
5. Move it to `completed` with the result, or to `failed` with the error
   message. Nothing touches the task after that.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol

from .models import (
    TaskOutcome,
    TaskParameters,
    TaskRunRequest,
    TaskStatus,
    TaskType,
)
from .operations import ContentOperations, require_record_ids
from ..core.errors import InvalidTaskTransition, TaskValidationError
from ..db.content_repo import parse_timestamp, validate_table_name

logger = logging.getLogger("content_ai.tasks")

VALID_TASK_TYPES = [t.value for t in TaskType]

_RECORD_ID_PURPOSES = {
    TaskType.GENERATE_SUMMARIES: "summary generation",
    TaskType.CATEGORIZE_CONTENT: "categorization",
    TaskType.SENTIMENT_ANALYSIS: "sentiment analysis",
}


class TaskRecorder(Protocol):
    async def create(self, task_type: str, parameters: Dict[str, Any], priority: str = "normal") -> str:
        ...

    async def mark_processing(self, task_id: str) -> None:
        ...

    async def mark_completed(self, task_id: str, results: Dict[str, Any]) -> None:
        ...

    async def mark_failed(self, task_id: str, error_message: str) -> None:
        ...


def validate_request(request: TaskRunRequest) -> TaskType:
    """
    Check a request before any task is written and return its task type.

    Raises
    ------
    TaskValidationError
        If required fields are missing, the task type is unknown, the table
        name is not a plain identifier, a date filter is not ISO 8601, or a
        per-record operation has no record ids.
    """
    if not request.task_type or request.parameters is None:
        raise TaskValidationError("Missing required fields: task_type, parameters")

    try:
        task_type = TaskType(request.task_type)
    except ValueError:
        raise TaskValidationError(
            f"Invalid task_type. Must be one of: {', '.join(VALID_TASK_TYPES)}"
        ) from None

    params = request.parameters
    if params.table_name is not None:
        try:
            validate_table_name(params.table_name)
        except ValueError as exc:
            raise TaskValidationError(str(exc)) from None

    if task_type is TaskType.ANALYZE_ARTICLES:
        for name in ("date_from", "date_to"):
            if params.filters.get(name):
                parse_timestamp(params.filters[name], name)

    if task_type.needs_record_ids:
        require_record_ids(params, _RECORD_ID_PURPOSES[task_type])

    return task_type


class TaskDispatcher:
    """
    Runs task requests against a task recorder and the content operations.
    """

    def __init__(self, tasks: TaskRecorder, operations: ContentOperations) -> None:
        self.tasks = tasks
        self.operations = operations

    async def run(self, request: TaskRunRequest) -> TaskOutcome:
        """
        Execute a task request end to end.

        Operation errors, including a result the store refuses, are captured
        in the returned outcome and the task is marked failed. Validation
        errors and failures to create, start or fail the task propagate; a task
        that cannot be started is logged by id since it stays `pending`.
        """
        task_type = validate_request(request)
        params = request.parameters

        task_id = await self.tasks.create(
            task_type.value,
            params.model_dump(mode="json", exclude_none=True),
            request.priority,
        )
        try:
            await self.tasks.mark_processing(task_id)
        except Exception as exc:
            logger.error(
                "Task %s (%s) left pending, could not start processing: %s",
                task_id, task_type.value, exc,
            )
            raise

        try:
            results = await self._execute(task_type, params)
            await self.tasks.mark_completed(task_id, results)
        except InvalidTaskTransition:
            raise
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning("Task %s (%s) failed: %s", task_id, task_type.value, message)
            await self.tasks.mark_failed(task_id, message)
            return TaskOutcome(task_id=task_id, status=TaskStatus.FAILED, error=message)

        logger.info("Task %s (%s) completed", task_id, task_type.value)
        return TaskOutcome(task_id=task_id, status=TaskStatus.COMPLETED, results=results)

    async def _execute(self, task_type: TaskType, params: TaskParameters) -> Dict[str, Any]:
        if task_type is TaskType.ANALYZE_ARTICLES:
            return await self.operations.analyze_articles(params)
        elif task_type is TaskType.GENERATE_SUMMARIES:
            return await self.operations.generate_summaries(params)
        elif task_type is TaskType.EXTRACT_INSIGHTS:
            return await self.operations.extract_insights(params)
        elif task_type is TaskType.CATEGORIZE_CONTENT:
            return await self.operations.categorize_content(params)
        elif task_type is TaskType.SENTIMENT_ANALYSIS:
            return await self.operations.sentiment_analysis(params)
        raise ValueError(f"Unknown task type: {task_type}")
