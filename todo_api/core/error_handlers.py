import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_api.core.exceptions import DuplicateTaskError, TaskNotFoundError
from todo_api.models import ErrorResponse

logger = logging.getLogger(__name__)

# Messages for required fields that are missing from the payload or null
MISSING_FIELD_MESSAGES = {
    "title": "Title is required",
    "completed": "Completed status is required",
}


def error_response(
    status_code: int,
    error: str,
    message: str,
    validation_errors: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        status=status_code,
        error=error,
        message=message,
        validation_errors=validation_errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def collect_validation_errors(exc: RequestValidationError) -> dict[str, str]:
    """Map every failed field to one message, first error per field wins."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        # loc is ("body", "title"), ("query", "keyword"), or ("body",) for a missing body
        loc = [str(part) for part in err.get("loc", ())]
        if err.get("type") == "json_invalid":
            # loc carries the decode position, not a field
            field = "body"
        else:
            field = (".".join(loc[1:]) or loc[0]) if loc else "request"
        # an explicit null counts as missing for required fields
        if field in MISSING_FIELD_MESSAGES and (
            err.get("type") == "missing" or err.get("input") is None
        ):
            message = MISSING_FIELD_MESSAGES[field]
        else:
            message = err["msg"]
        errors.setdefault(field, message)
    return errors


async def task_not_found_handler(request: Request, exc: TaskNotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, "Not Found", str(exc))


async def duplicate_task_handler(request: Request, exc: DuplicateTaskError):
    return error_response(status.HTTP_409_CONFLICT, "Conflict", str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation Failed",
        "Invalid request data",
        collect_validation_errors(exc),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = error_response(
        exc.status_code, HTTPStatus(exc.status_code).phrase, str(exc.detail)
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskNotFoundError, task_not_found_handler)
    app.add_exception_handler(DuplicateTaskError, duplicate_task_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
