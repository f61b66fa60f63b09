"""FastAPI exception handlers.

Every failure leaves the API in the same shape: ``AppError.to_dict()``
with the status taken from the error code. Route handlers surface an
``Err`` with ``raise_result``; dependencies that cannot return a Result
use ``raise_error``.
"""
from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

from .boundaries import request_validation_error
from .types import AppError, ErrorCode

log = get_logger("errors.handlers")

CORRELATION_HEADER = "X-Correlation-ID"

# Starlette-raised statuses (unknown route, wrong method) to our codes
_HTTP_STATUS_CODES = {
    400: ErrorCode.E2000_VALIDATION_GENERIC,
    401: ErrorCode.E3004_TOKEN_MISSING,
    404: ErrorCode.E4010_NOT_FOUND,
    405: ErrorCode.E2000_VALIDATION_GENERIC,
    422: ErrorCode.E2000_VALIDATION_GENERIC,
}


class AppErrorException(Exception):
    """Carries an AppError through FastAPI's exception machinery."""

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


def error_response(error: AppError, request: Request | None = None, status_code: int | None = None) -> JSONResponse:
    # Prefer the ID the request middleware bound so body and header agree
    correlation_id = structlog.contextvars.get_contextvars().get("correlation_id")
    if correlation_id is None and request is not None:
        correlation_id = request.headers.get(CORRELATION_HEADER)
    error = error.with_correlation_id(correlation_id)
    status_code = status_code or error.code.http_status

    (log.warning if status_code < 500 else log.error)(
        "error_response",
        status=status_code,
        error_code=error.code.name,
        message=error.message,
        origin=error.origin,
        correlation_id=error.correlation_id,
    )
    return JSONResponse(status_code=status_code, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    return error_response(exc.error, request)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.E9000_INTERNAL_GENERIC)
    error = AppError(code=code, message=str(exc.detail or f"HTTP {exc.status_code}"), origin="http")
    return error_response(error, request, status_code=exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(request_validation_error(list(exc.errors())), request)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    error = AppError(
        code=ErrorCode.E9001_UNEXPECTED_ERROR,
        message="An unexpected error occurred",
        origin="unhandled",
        cause=exc,
    )
    log.exception("unhandled_exception", error_type=type(exc).__name__)
    return error_response(error, request)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def raise_error(error: AppError) -> None:
    """Raise ``error`` for the handlers above to render.

    Usage:
        if not user:
            raise_error(invalid_credentials(origin="api.auth.login").error)
    """
    raise AppErrorException(error)


def raise_result(result) -> None:
    """Raise if ``result`` is an Err; otherwise do nothing.

    Usage:
        result = await tracker.get_daily_word(user_id)
        raise_result(result)
        return result.unwrap()
    """
    if result.is_err():
        raise AppErrorException(result.unwrap_err())
