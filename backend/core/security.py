"""Password hashing, token issuance and the authenticated-user dependency."""
from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt

from core.config import settings
from core.errors import (
    AuthErrorMapper,
    Err,
    Ok,
    Result,
    AppError,
    raise_error,
    token_invalid,
    token_missing,
)
from core.logging import auth_logger, bind_context

log = auth_logger()

_auth_mapper = AuthErrorMapper("auth.token")
_bearer = HTTPBearer(auto_error=False)

MAX_PASSWORD_BYTES = 72


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a JWT carrying ``data`` plus ``iat``/``exp`` claims."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.JWT_EXPIRATION_HOURS))
    claims = {**data, "iat": now, "exp": expire}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Result[dict, AppError]:
    """Decode and verify a JWT.

    Returns:
        Ok(claims) for a valid, unexpired token
        Err(token_expired | token_invalid) otherwise
    """
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except Exception as e:
        return Err(_auth_mapper.map_exception(e))

    subject = claims.get("sub")
    if not subject:
        return token_invalid("missing subject", origin="auth.token")
    if not isinstance(subject, str):
        return token_invalid("malformed subject", origin="auth.token")
    try:
        UUID(subject)
    except ValueError:
        return token_invalid("malformed subject", origin="auth.token")
    return Ok(claims)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """Dependency resolving the bearer token to the caller's user ID."""
    if credentials is None or not credentials.credentials:
        raise_error(token_missing(origin="auth.dependency").error)

    result = decode_access_token(credentials.credentials)
    if result.is_err():
        log.info("token_rejected", code=result.unwrap_err().code.name)
        raise_error(result.unwrap_err())

    user_id = result.unwrap()["sub"]
    bind_context(user_id=user_id)
    return user_id
