"""Authentication API with Monadic Error Handling

Handles user registration, login and the current-user lookup
using Result types for predictable error propagation.
"""
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db, fetch_one
from core.logging import auth_logger
from core.security import (
    MAX_PASSWORD_BYTES,
    get_password_hash,
    verify_password,
    create_access_token,
    get_current_user_id,
)
from core.errors import (
    invalid_credentials,
    duplicate_key,
    raise_error,
    raise_result,
)
from models.enums import DEFAULT_LEVEL
from models.progress import UserProgress
from models.user import User

router = APIRouter()
log = auth_logger()


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        # bcrypt only reads the first 72 bytes
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes in UTF-8")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: UUID
    email: str
    current_level: str
    created_at: datetime | None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


def _issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "email": user.email})


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new account starting at the default level."""
    email = user_data.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise_error(duplicate_key("User", "email", origin="api.auth.register").error)

    user = User(
        email=email,
        password_hash=get_password_hash(user_data.password),
        current_level=DEFAULT_LEVEL.value,
    )
    db.add(user)
    try:
        await db.flush()
        db.add(UserProgress(
            user_id=user.id,
            current_vocab_index=0,
            streak_days=0,
            words_learned_count=0,
            words_skipped_count=0,
        ))
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise_error(duplicate_key("User", "email", origin="api.auth.register").error)

    log.info("user_registered", user_id=str(user.id))
    return AuthResponse(user=UserResponse.model_validate(user), token=_issue_token(user))


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate with email and password."""
    result = await db.execute(select(User).where(User.email == credentials.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        log.info("login_failed")
        raise_error(invalid_credentials(origin="api.auth.login").error)

    log.info("login_succeeded", user_id=str(user.id))
    return AuthResponse(user=UserResponse.model_validate(user), token=_issue_token(user))


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get current authenticated user."""
    result = await fetch_one(db, User, UUID(user_id), "User")
    raise_result(result)
    return result.unwrap()
