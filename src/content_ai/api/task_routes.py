"""
Task Routes

`POST /process-task-run` creates and runs one content-analysis task.

Responses
---------
- 200 {success: true, task_id, results, status: "completed"}
- 500 {success: false, task_id, error, status: "failed"}   operation failed
- 400 {success: false, error}                              rejected, no task
- 405 {success: false, error}                              method not allowed

`OPTIONS` answers CORS preflight with permissive headers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from .models import TaskRunResponse
from .dependencies import get_task_dispatcher
from ..core.errors import TaskValidationError
from ..tasks.dispatcher import TaskDispatcher
from ..tasks.models import TaskRunRequest

router = APIRouter(tags=["tasks"])

TASK_PATH = "/process-task-run"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def _json(status_code: int, body: TaskRunResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers={"Access-Control-Allow-Origin": "*"},
    )


@router.options(TASK_PATH, include_in_schema=False)
async def task_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.api_route(
    TASK_PATH,
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def task_method_not_allowed() -> JSONResponse:
    return _json(
        status.HTTP_405_METHOD_NOT_ALLOWED,
        TaskRunResponse(success=False, error="Method not allowed"),
    )


@router.post(
    TASK_PATH,
    summary="Create and run a content-analysis task",
    response_model=TaskRunResponse,
)
async def process_task_run(
    req: TaskRunRequest,
    dispatcher: Annotated[TaskDispatcher, Depends(get_task_dispatcher)],
) -> JSONResponse:
    """
    Run a task and report its outcome.

    Callers must check `success` in the body: a task that was created but
    failed is reported with its `task_id` and the error message.
    """
    try:
        outcome = await dispatcher.run(req)
    except TaskValidationError as exc:
        return _json(
            status.HTTP_400_BAD_REQUEST,
            TaskRunResponse(success=False, error=str(exc)),
        )

    body = TaskRunResponse(
        success=outcome.success,
        task_id=outcome.task_id,
        results=outcome.results,
        error=outcome.error,
        status=outcome.status.value,
    )
    code = status.HTTP_200_OK if outcome.success else status.HTTP_500_INTERNAL_SERVER_ERROR
    return _json(code, body)
