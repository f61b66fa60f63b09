"""Result types and the error taxonomy.

Engines and persistence helpers return ``Ok(value)`` or ``Err(AppError)``
instead of raising; the HTTP layer turns an ``Err`` into a JSON error body
whose status comes from the error code's range.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import IntEnum
from typing import Callable, Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")


# (first code, last code, HTTP status, category), checked in order
_CODE_RANGES: tuple[tuple[int, int, int, str], ...] = (
    (2000, 2999, 400, "validation"),
    (3000, 3009, 401, "auth"),
    (3010, 3999, 403, "auth"),
    (4010, 4010, 404, "database"),
    (4011, 4019, 409, "database"),
    (4000, 4999, 503, "database"),
)


class ErrorCode(IntEnum):
    """Numbered error codes, grouped by thousands.

    2xxx request validation, 3xxx authentication, 4xxx persistence,
    9xxx anything unexpected.
    """
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2004_INVALID_TYPE = 2004
    E2020_INVALID_STATUS = 2020

    E3001_INVALID_CREDENTIALS = 3001
    E3002_TOKEN_EXPIRED = 3002
    E3003_TOKEN_INVALID = 3003
    E3004_TOKEN_MISSING = 3004

    E4000_DATABASE_GENERIC = 4000
    E4001_CONNECTION_FAILED = 4001
    E4003_TRANSACTION_FAILED = 4003
    E4010_NOT_FOUND = 4010
    E4011_DUPLICATE_KEY = 4011
    E4012_CONSTRAINT_VIOLATION = 4012

    E9000_INTERNAL_GENERIC = 9000
    E9001_UNEXPECTED_ERROR = 9001

    def _range(self) -> tuple[int, str]:
        for low, high, status, category in _CODE_RANGES:
            if low <= self.value <= high:
                return status, category
        return 500, "internal"

    @property
    def http_status(self) -> int:
        return self._range()[0]

    @property
    def category(self) -> str:
        return self._range()[1]


def _new_correlation_id() -> str:
    return uuid4().hex[:8]


@dataclass(frozen=True, slots=True)
class AppError:
    """An error with its code, where it happened and what it concerned."""
    code: ErrorCode
    message: str
    origin: str = ""
    correlation_id: str = field(default_factory=_new_correlation_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    def with_origin(self, origin: str) -> AppError:
        return replace(self, origin=origin)

    def with_correlation_id(self, correlation_id: str | None) -> AppError:
        """Adopt the request's correlation ID when there is one."""
        if not correlation_id:
            return self
        return replace(self, correlation_id=correlation_id)

    def to_dict(self) -> dict:
        """Response body for this error."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "correlation_id": self.correlation_id,
                "timestamp": self.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable) -> Err[E]:
        return self


Result = Union[Ok[T], Err[E]]
