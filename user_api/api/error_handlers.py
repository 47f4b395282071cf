"""
Exception handlers for the User API.

Domain errors become client errors. Anything else is logged in full and
answered with a 500 that names the error type but not its message.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from ..constants import CORRELATION_ID_HEADER
from ..exceptions import DuplicateUserError, UserValidationError
from ..observability import get_correlation_id, get_logger

logger = get_logger(__name__)


async def user_validation_error_handler(request: Request, exc: UserValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": exc.errors})


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for item in exc.errors():
        loc = [str(part) for part in item["loc"] if part != "body"]
        errors.setdefault(".".join(loc) or "body", []).append(item["msg"])
    return JSONResponse(status_code=400, content={"errors": errors})


async def duplicate_user_error_handler(request: Request, exc: DuplicateUserError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"errorMessage": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Exception occurred on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"error_type": type(exc).__name__},
    )
    response = JSONResponse(
        status_code=500,
        content={"errorMessage": f"Exception occurred. Type: {type(exc).__name__}"},
    )
    correlation_id = get_correlation_id()
    if correlation_id:
        response.headers[CORRELATION_ID_HEADER] = correlation_id
    return response


def register_error_handlers(app: FastAPI) -> None:
    """Install the User API exception handlers on ``app``."""
    app.add_exception_handler(UserValidationError, user_validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(DuplicateUserError, duplicate_user_error_handler)
    app.add_exception_handler(PyMongoError, unhandled_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
