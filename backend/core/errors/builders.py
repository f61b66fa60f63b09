"""Constructors for the errors the API actually produces.

Each returns an ``Err`` ready to be returned from a Result-typed function;
use ``.error`` on it when the bare ``AppError`` is needed.
"""
from uuid import UUID

from .types import AppError, Err, ErrorCode


def fail(code: ErrorCode, message: str, origin: str = "", cause: Exception | None = None, **metadata) -> Err[AppError]:
    return Err(AppError(code=code, message=message, origin=origin, metadata=metadata, cause=cause))


# Validation (E2xxx)

def validation_error(
    message: str,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    value: str | None = None,
    origin: str = "",
) -> Err[AppError]:
    metadata = {k: v for k, v in (("field", field), ("value", value)) if v is not None}
    return fail(code, message, origin, **metadata)


def invalid_status(value: str, allowed: list[str], origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Status must be one of {', '.join(allowed)}",
        code=ErrorCode.E2020_INVALID_STATUS,
        field="status",
        value=value,
        origin=origin,
    )


# Authentication (E3xxx)

def invalid_credentials(origin: str = "") -> Err[AppError]:
    # Same message whether the email or the password was wrong
    return fail(ErrorCode.E3001_INVALID_CREDENTIALS, "Invalid email or password", origin)


def token_expired(origin: str = "") -> Err[AppError]:
    return fail(ErrorCode.E3002_TOKEN_EXPIRED, "Authentication token has expired", origin)


def token_invalid(reason: str = "", origin: str = "") -> Err[AppError]:
    message = f"Invalid authentication token: {reason}" if reason else "Invalid authentication token"
    return fail(ErrorCode.E3003_TOKEN_INVALID, message, origin)


def token_missing(origin: str = "") -> Err[AppError]:
    return fail(ErrorCode.E3004_TOKEN_MISSING, "Authentication token required", origin)


# Persistence (E4xxx)

def not_found(entity: str, id: str | UUID | None = None, origin: str = "") -> Err[AppError]:
    if id is None:
        return fail(ErrorCode.E4010_NOT_FOUND, f"{entity} not found", origin, entity=entity)
    return fail(ErrorCode.E4010_NOT_FOUND, f"{entity} {id} not found", origin, entity=entity, id=str(id))


def duplicate_key(entity: str, field: str, origin: str = "") -> Err[AppError]:
    return fail(
        ErrorCode.E4011_DUPLICATE_KEY,
        f"{entity} with this {field} already exists",
        origin,
        entity=entity,
        field=field,
    )


def constraint_violation(detail: str, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return fail(ErrorCode.E4012_CONSTRAINT_VIOLATION, f"Constraint violation: {detail}", origin, cause=cause)


def db_connection_failed(detail: str = "", origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return fail(ErrorCode.E4001_CONNECTION_FAILED, "Database unavailable", origin, cause=cause, detail=detail)


def transaction_failed(detail: str = "", origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return fail(ErrorCode.E4003_TRANSACTION_FAILED, "Database operation failed", origin, cause=cause, detail=detail)


# Internal (E9xxx)

def internal_error(message: str, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return fail(ErrorCode.E9001_UNEXPECTED_ERROR, message, origin, cause=cause)
