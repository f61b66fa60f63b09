"""Result-based error handling.

Engines and database helpers return ``Result`` values; route handlers
call ``raise_result`` and the registered handlers render the error.

    from core.errors import Ok, Result, AppError, not_found

    async def find_user(db, user_id) -> Result[User, AppError]:
        user = await db.get(User, user_id)
        if user is None:
            return not_found("User", user_id, origin="engine.tracking")
        return Ok(user)
"""
from .types import AppError, Err, ErrorCode, Ok, Result
from .builders import (
    validation_error,
    invalid_status,
    invalid_credentials,
    token_expired,
    token_invalid,
    token_missing,
    not_found,
    duplicate_key,
    constraint_violation,
    db_connection_failed,
    transaction_failed,
    internal_error,
)
from .boundaries import (
    AuthErrorMapper,
    DatabaseErrorMapper,
    map_db_errors,
    request_validation_error,
)
from .handlers import (
    AppErrorException,
    error_response,
    raise_error,
    raise_result,
    register_error_handlers,
)

__all__ = [
    "AppError",
    "Err",
    "ErrorCode",
    "Ok",
    "Result",
    "validation_error",
    "invalid_status",
    "invalid_credentials",
    "token_expired",
    "token_invalid",
    "token_missing",
    "not_found",
    "duplicate_key",
    "constraint_violation",
    "db_connection_failed",
    "transaction_failed",
    "internal_error",
    "AuthErrorMapper",
    "DatabaseErrorMapper",
    "map_db_errors",
    "request_validation_error",
    "AppErrorException",
    "error_response",
    "raise_error",
    "raise_result",
    "register_error_handlers",
]
