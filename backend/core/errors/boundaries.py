"""Translation of library exceptions into AppErrors.

Database, token and request-validation failures each have one mapper.
``map_db_errors`` wraps a Result-returning coroutine so that any exception
escaping it comes back as an ``Err`` instead.
"""
from __future__ import annotations

from functools import wraps
from typing import Awaitable, Callable, TypeVar

from jose import ExpiredSignatureError, JWTError
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from core.logging import db_logger

from .types import AppError, Err, ErrorCode, Result
from .builders import (
    constraint_violation,
    db_connection_failed,
    duplicate_key,
    internal_error,
    token_expired,
    token_invalid,
    transaction_failed,
)

T = TypeVar("T")

log = db_logger()


def _driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class DatabaseErrorMapper:
    """Maps SQLAlchemy exceptions raised under ``origin``."""

    __slots__ = ("origin",)

    def __init__(self, origin: str = "database"):
        self.origin = origin

    def map_exception(self, exc: Exception) -> AppError:
        log.warning("db_exception", origin=self.origin, error_type=type(exc).__name__, error=str(exc))

        if isinstance(exc, IntegrityError):
            message = _driver_message(exc).lower()
            if "unique" in message or "duplicate key" in message:
                return duplicate_key("record", "key", origin=self.origin).error
            return constraint_violation(_driver_message(exc), origin=self.origin, cause=exc).error

        if isinstance(exc, OperationalError):
            message = _driver_message(exc)
            if "connect" in message.lower():
                return db_connection_failed(message, origin=self.origin, cause=exc).error
            return transaction_failed(message, origin=self.origin, cause=exc).error

        if isinstance(exc, SQLAlchemyError):
            return transaction_failed(str(exc), origin=self.origin, cause=exc).error

        return internal_error(f"Unexpected error: {exc}", origin=self.origin, cause=exc).error


class AuthErrorMapper:
    """Maps python-jose decode failures to token errors."""

    __slots__ = ("origin",)

    def __init__(self, origin: str = "auth"):
        self.origin = origin

    def map_exception(self, exc: Exception) -> AppError:
        # ExpiredSignatureError is a JWTError, so it goes first
        if isinstance(exc, ExpiredSignatureError):
            return token_expired(origin=self.origin).error
        if isinstance(exc, JWTError):
            return token_invalid(str(exc), origin=self.origin).error
        return internal_error(f"Token handling failed: {exc}", origin=self.origin, cause=exc).error


def _validation_code(error_type: str) -> ErrorCode:
    if error_type == "missing":
        return ErrorCode.E2001_REQUIRED_FIELD_MISSING
    if error_type.endswith(("_type", "_parsing")):
        return ErrorCode.E2004_INVALID_TYPE
    if error_type in ("value_error", "enum", "literal_error", "string_too_short", "too_short"):
        return ErrorCode.E2002_INVALID_FORMAT
    return ErrorCode.E2000_VALIDATION_GENERIC


def request_validation_error(errors: list[dict], origin: str = "request_validation") -> AppError:
    """Fold pydantic v2 error dicts into one AppError listing every field."""
    fields = []
    for err in errors:
        # Drop the leading "body"/"query"/"path" segment
        loc = [str(part) for part in err.get("loc", ())]
        fields.append({
            "field": ".".join(loc[1:] or loc),
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        })

    codes = {_validation_code(f["type"]) for f in fields}
    code = codes.pop() if len(codes) == 1 else ErrorCode.E2000_VALIDATION_GENERIC
    return AppError(
        code=code,
        message="Request validation failed",
        origin=origin,
        metadata={"errors": fields},
    )


def map_db_errors(origin: str = "database"):
    """Decorate an async Result-returning function so exceptions become Errs.

    Usage:
        @map_db_errors("engine.tracking")
        async def skip_word(...) -> Result[DailyWord, AppError]:
            ...
    """
    mapper = DatabaseErrorMapper(origin)

    def decorator(fn: Callable[..., Awaitable[Result[T, AppError]]]):
        @wraps(fn)
        async def wrapper(*args, **kwargs) -> Result[T, AppError]:
            try:
                return await fn(*args, **kwargs)
            except Exception as exc:
                return Err(mapper.map_exception(exc))
        return wrapper
    return decorator
