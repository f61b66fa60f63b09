"""Tests for the error taxonomy and exception mapping."""
import pytest
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.exc import IntegrityError, OperationalError

from core.errors import (
    AuthErrorMapper,
    DatabaseErrorMapper,
    ErrorCode,
    Ok,
    map_db_errors,
    not_found,
    request_validation_error,
)


@pytest.mark.parametrize(
    "code, status",
    [
        (ErrorCode.E2002_INVALID_FORMAT, 400),
        (ErrorCode.E2020_INVALID_STATUS, 400),
        (ErrorCode.E3001_INVALID_CREDENTIALS, 401),
        (ErrorCode.E3004_TOKEN_MISSING, 401),
        (ErrorCode.E4010_NOT_FOUND, 404),
        (ErrorCode.E4011_DUPLICATE_KEY, 409),
        (ErrorCode.E4001_CONNECTION_FAILED, 503),
        (ErrorCode.E9001_UNEXPECTED_ERROR, 500),
    ],
)
def test_http_status(code, status):
    assert code.http_status == status


def test_not_found_body():
    error = not_found("Vocabulary", "abc", origin="test").unwrap_err()
    body = error.to_dict()["error"]
    assert body["code"] == "E4010_NOT_FOUND"
    assert body["category"] == "database"
    assert body["metadata"] == {"entity": "Vocabulary", "id": "abc"}


def test_correlation_id_adopted_only_when_given():
    error = not_found("User").unwrap_err()
    assert error.with_correlation_id(None) is error
    assert error.with_correlation_id("req-1").correlation_id == "req-1"


def test_integrity_error_mapping():
    mapper = DatabaseErrorMapper("test")
    unique = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))
    other = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: users.email"))
    assert mapper.map_exception(unique).code == ErrorCode.E4011_DUPLICATE_KEY
    assert mapper.map_exception(other).code == ErrorCode.E4012_CONSTRAINT_VIOLATION


def test_operational_error_mapping():
    mapper = DatabaseErrorMapper("test")
    refused = OperationalError("SELECT 1", {}, Exception("could not connect to server"))
    assert mapper.map_exception(refused).code == ErrorCode.E4001_CONNECTION_FAILED


def test_jwt_error_mapping():
    mapper = AuthErrorMapper("test")
    assert mapper.map_exception(ExpiredSignatureError("expired")).code == ErrorCode.E3002_TOKEN_EXPIRED
    assert mapper.map_exception(JWTError("bad")).code == ErrorCode.E3003_TOKEN_INVALID


async def test_map_db_errors_turns_exceptions_into_errs():
    @map_db_errors("test.decorated")
    async def broken():
        raise RuntimeError("boom")

    @map_db_errors("test.decorated")
    async def fine():
        return Ok(3)

    result = await broken()
    assert result.is_err()
    assert result.unwrap_err().code == ErrorCode.E9001_UNEXPECTED_ERROR
    assert result.unwrap_err().origin == "test.decorated"
    assert (await fine()).unwrap() == 3


def test_request_validation_error_folds_fields():
    error = request_validation_error([
        {"loc": ("body", "status"), "msg": "Input should be 'known' or 'skipped'", "type": "literal_error"},
    ])
    assert error.code == ErrorCode.E2002_INVALID_FORMAT
    assert error.metadata["errors"][0]["field"] == "status"

    mixed = request_validation_error([
        {"loc": ("body", "email"), "msg": "Field required", "type": "missing"},
        {"loc": ("body", "password"), "msg": "too short", "type": "string_too_short"},
    ])
    assert mixed.code == ErrorCode.E2000_VALIDATION_GENERIC
    assert len(mixed.metadata["errors"]) == 2
