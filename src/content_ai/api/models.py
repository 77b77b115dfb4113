"""
API Models

This module defines the Pydantic models used for request/response validation
of the embedding and task endpoints. The task request model lives in
`content_ai.tasks.models` next to the dispatcher that consumes it.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Literal
from pydantic import BaseModel, ConfigDict

from ..embeddings.models import SourceRecord


# ---------------------------------------------------------------------
# Embedding Models
# ---------------------------------------------------------------------

class GenerateEmbeddingsRequest(BaseModel):
    """
    Database change event carrying the content record to (re)embed.
    """
    record: SourceRecord

    model_config = ConfigDict(extra="allow")


class GenerateEmbeddingsResponse(BaseModel):
    message: str


class EmbeddingErrorResponse(BaseModel):
    error: str


# ---------------------------------------------------------------------
# Task Models
# ---------------------------------------------------------------------

class TaskRunResponse(BaseModel):
    """
    Response of `POST /process-task-run`.

    `task_id` is absent when the request was rejected before a task existed.
    """
    success: bool
    task_id: Optional[str] = None
    results: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    status: Optional[Literal["pending", "processing", "completed", "failed"]] = None

    model_config = ConfigDict(extra="forbid")
