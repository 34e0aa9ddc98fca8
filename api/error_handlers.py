# api/error_handlers.py
"""Centralized error-to-response mapping"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from core.domain import ErrorKind
from core.errors import GENERIC_ERROR_MESSAGE, AppError

logger = logging.getLogger(settings.LOGGER_NAME)


def error_response(err: AppError) -> JSONResponse:
    """
    Render an AppError as ``{status, error}``.

    Development adds kind, detail and stack. Elsewhere non-operational
    errors collapse to a generic 500 so internals never leak.
    """
    if settings.is_development:
        content = {
            "status": err.status,
            "error": err.message,
            "kind": err.kind.value,
            "detail": err.detail,
            "stack": "".join(traceback.format_exception(type(err), err, err.__traceback__)),
        }
        return JSONResponse(status_code=err.status_code, content=content)

    if not err.is_operational:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "error": GENERIC_ERROR_MESSAGE},
        )
    return JSONResponse(
        status_code=err.status_code,
        content={"status": err.status, "error": err.message},
    )


def _log(request: Request, err: AppError) -> None:
    message = f"{err} (Status: {err.status_code}) for {request.method} {request.url.path}"
    if err.status_code >= 500:
        logger.error(f"{message}: {err.detail}", exc_info=not err.is_operational)
    else:
        logger.warning(message)


async def app_error_handler(request: Request, exc: AppError):
    _log(request, exc)
    return error_response(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {location + ' - ' if location else ''}{first.get('msg', 'malformed input')}"
    err = AppError(message, kind=ErrorKind.VALIDATION, detail=str(errors))
    _log(request, err)
    return error_response(err)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        kind = ErrorKind.NOT_FOUND
    elif exc.status_code == 401:
        kind = ErrorKind.AUTHORIZATION
    elif exc.status_code < 500:
        kind = ErrorKind.VALIDATION
    else:
        kind = ErrorKind.INTERNAL
    err = AppError(
        str(exc.detail) if exc.detail else f"HTTP {exc.status_code}",
        kind=kind,
        status_code=exc.status_code,
    )
    _log(request, err)
    return error_response(err)


async def general_exception_handler(request: Request, exc: Exception):
    err = AppError.wrap(exc)
    logger.error(
        f"Unexpected error for {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return error_response(err)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
