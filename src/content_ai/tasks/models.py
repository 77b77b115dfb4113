"""
Task Data Models

Enumerations for the task lifecycle and the request / outcome models of the
task dispatcher.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskType(str, enum.Enum):
    """
    Closed set of content-analysis operations.

    ANALYZE_ARTICLES: whole-batch thematic analysis of filtered articles
    GENERATE_SUMMARIES: 2-3 sentence summary per record
    EXTRACT_INSIGHTS: whole-batch trend/statistic extraction
    CATEGORIZE_CONTENT: single category per record
    SENTIMENT_ANALYSIS: sentiment label and confidence per record
    """

    ANALYZE_ARTICLES = "analyze_articles"
    GENERATE_SUMMARIES = "generate_summaries"
    EXTRACT_INSIGHTS = "extract_insights"
    CATEGORIZE_CONTENT = "categorize_content"
    SENTIMENT_ANALYSIS = "sentiment_analysis"

    @property
    def needs_record_ids(self) -> bool:
        return self in _PER_RECORD_TYPES


_PER_RECORD_TYPES: FrozenSet[TaskType] = frozenset({
    TaskType.GENERATE_SUMMARIES,
    TaskType.CATEGORIZE_CONTENT,
    TaskType.SENTIMENT_ANALYSIS,
})


class TaskStatus(str, enum.Enum):
    """
    Task lifecycle states.

    PENDING: row created, nothing executed yet
    PROCESSING: operation running, external calls may be in flight
    COMPLETED: terminal; `results` holds the operation output
    FAILED: terminal; `error_message` holds the failure
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    def allowed_next(self) -> FrozenSet["TaskStatus"]:
        return _TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]


_TRANSITIONS: Dict[TaskStatus, FrozenSet[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.PROCESSING}),
    TaskStatus.PROCESSING: frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.FAILED: frozenset(),
}


# ---------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------

class TaskParameters(BaseModel):
    """
    Free-form task input. Known keys are typed; anything else is kept.
    """
    table_name: Optional[str] = None
    record_ids: Optional[List[Any]] = None
    filters: Dict[str, Any] = Field(default_factory=dict)
    options: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")


class TaskRunRequest(BaseModel):
    """
    Body of `POST /process-task-run`.

    `task_type` is a plain string here so that unknown values are reported
    with the list of valid types instead of a generic schema error.
    """
    task_type: Optional[str] = None
    parameters: Optional[TaskParameters] = None
    priority: Literal["low", "normal", "high"] = "normal"


# ---------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------

@dataclass
class TaskOutcome:
    """Final state of one dispatched task."""
    task_id: str
    status: TaskStatus
    results: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is TaskStatus.COMPLETED
