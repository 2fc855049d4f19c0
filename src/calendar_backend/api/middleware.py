"""API error handling: consistent error responses.

Registers FastAPI exception handlers that convert domain exceptions into
``{"error": "<message>"}`` JSON responses.

Status code mapping:
- ``AuthenticationException`` / ``GoogleOAuthException`` → 401
- ``NotAttendeeException`` / ``UnknownCategoryException`` / request validation → 400
- ``GoogleCalendarException`` / ``DatabaseException`` → 500, detail passed through
- Starlette HTTP errors (unmatched routes, etc.) keep their status
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from calendar_backend.core.exceptions import ApplicationException

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _handle_application_exception(request: Request, exc: ApplicationException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
            exc_info=exc,
        )
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return _error(exc.status_code, exc.message)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", "invalid"))
    message = "; ".join(messages) or "Invalid request"
    logger.info(f"Validation error on {request.method} {request.url.path}: {message}")
    return _error(400, message)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on ``app``."""
    app.add_exception_handler(ApplicationException, _handle_application_exception)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
