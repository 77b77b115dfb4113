"""
Error Taxonomy and Global Error Handling

This module defines the exceptions raised by the dispatcher, the embedding
pipeline and the external API clients, together with the application-wide
exception handlers registered by `create_app()`.

Taxonomy
--------
- TaskValidationError      request shape errors, rejected before any write
- RecordFetchError         content store query failures
- CompletionError          chat completion transport / HTTP / shape failures
- CompletionParseError     completion returned non-JSON where JSON was expected
- InvalidTaskTransition    attempted lifecycle transition from the wrong state

Design Goals
------------
- Never leak internal exception details from the outermost boundary
- Always return deterministic, machine-readable error responses
- Log full stack traces internally for debugging
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("content_ai.errors")

# Endpoints whose error body is a bare `{"error": ...}` without a success flag.
PLAIN_ERROR_PATHS = frozenset({"/generate-embeddings"})


# ---------------------------------------------------------------------
# Domain Exceptions
# ---------------------------------------------------------------------

class TaskValidationError(ValueError):
    """Raised when a task request is rejected before a task is created."""


class RecordFetchError(RuntimeError):
    """Raised when content records cannot be read from the store."""


class CompletionError(RuntimeError):
    """Raised when the chat completion API call fails."""


class CompletionParseError(CompletionError):
    """Raised when a completion that should be JSON cannot be parsed."""


class InvalidTaskTransition(RuntimeError):
    """Raised when a task is moved out of a state it is not in."""


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Invalid request: " + "; ".join(parts) if parts else "Invalid request"


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Map FastAPI body validation failures (malformed JSON, wrong field types)
    to the 400 response shape of the endpoint that received them.
    """
    logger.info(
        "Rejected request %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
    )
    content: Dict[str, Any] = {"error": _describe_validation_error(exc)}
    if request.url.path not in PLAIN_ERROR_PATHS:
        content = {"success": False, **content}
    return JSONResponse(status_code=400, content=content)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "success": False,
        "error": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
