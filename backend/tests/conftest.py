"""Test configuration."""
import os

# Set test environment before any imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Import after environment setup
from core.database import Base, get_db
from core.security import create_access_token, get_password_hash
from models import PlacementQuestion, User, UserProgress, Vocabulary
from scripts.seed_placement import load_question_bank, replace_bank
from main import app
from tests.factories import make_words


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the app with the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def user(db: AsyncSession) -> User:
    """Registered user at N5 with a fresh progress row."""
    user = User(email="learner@example.com", password_hash=get_password_hash("password123"), current_level="N5")
    db.add(user)
    await db.flush()
    db.add(UserProgress(
        user_id=user.id,
        current_vocab_index=0,
        streak_days=0,
        words_learned_count=0,
        words_skipped_count=0,
    ))
    await db.commit()
    return user


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(data={"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def n5_words(db: AsyncSession) -> list[Vocabulary]:
    words = make_words("N5", 5)
    db.add_all(words)
    await db.commit()
    return words


@pytest.fixture
async def placement_bank(db: AsyncSession) -> list[PlacementQuestion]:
    """The shipped 20-question bank."""
    await replace_bank(db, load_question_bank())
    await db.commit()
    result = await db.execute(select(PlacementQuestion).order_by(PlacementQuestion.order_index))
    return list(result.scalars().all())
