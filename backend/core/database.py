"""Async engine, sessions and portable column types.

SQLite (aiosqlite) is the default store; PostgreSQL (asyncpg) works with
the same models because ``GUID`` and ``StringList`` pick a native type per
dialect. Query helpers return Results instead of raising.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, TypeVar
from uuid import UUID

from sqlalchemy import JSON, func, select
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import CHAR, TypeDecorator

from core.config import settings
from core.errors import AppError, DatabaseErrorMapper, Err, Ok, Result, not_found

T = TypeVar("T")


class GUID(TypeDecorator):
    """UUID column: native on PostgreSQL, 32-char hex string elsewhere."""
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(32))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == "postgresql":
            return value
        return (value if isinstance(value, UUID) else UUID(str(value))).hex

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, UUID):
            return value
        return UUID(value)


class StringList(TypeDecorator):
    """Ordered list of strings stored as a JSON array (JSONB on PostgreSQL).

    NULL reads back as ``[]`` and ``None`` is written as ``[]``.
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value, dialect):
        return [str(item) for item in value or ()]

    def process_result_value(self, value, dialect):
        return list(value or ())


def _engine_options(url: str) -> dict:
    options = {"echo": settings.LOG_SQL}
    if not url.startswith("sqlite"):
        options.update(pool_pre_ping=True, pool_size=5, max_overflow=10)
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()

_mapper = DatabaseErrorMapper("database")


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Session for scripts and other code outside a request."""
    async with AsyncSessionLocal() as session:
        yield session


async def fetch_one(
    session: AsyncSession,
    model: type[T],
    id: UUID,
    entity_name: str | None = None,
) -> Result[T, AppError]:
    """Row of ``model`` by primary key, or a not-found Err."""
    try:
        entity = await session.get(model, id)
    except SQLAlchemyError as e:
        return Err(_mapper.map_exception(e))
    if entity is None:
        return not_found(entity_name or model.__name__, id, origin="database.fetch_one")
    return Ok(entity)


async def count_by(session: AsyncSession, model: type, **filters) -> Result[int, AppError]:
    """Number of ``model`` rows whose columns equal ``filters``."""
    query = select(func.count()).select_from(model)
    for column, value in filters.items():
        query = query.where(getattr(model, column) == value)
    try:
        result = await session.execute(query)
    except SQLAlchemyError as e:
        return Err(_mapper.map_exception(e))
    return Ok(result.scalar_one())
