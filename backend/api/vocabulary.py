"""Vocabulary API

Daily word delivery, skip/advance actions and level listings.
"""
import math
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db, fetch_one, count_by
from core.security import get_current_user_id
from core.errors import raise_result
from engines.tracking import ProgressTracker, DailyWord
from models.enums import JLPTLevel, VocabStatus
from models.vocabulary import Vocabulary

router = APIRouter()

# Keeps the row offset well inside a 64-bit integer
MAX_PAGE = 1_000_000


class VocabularyResponse(BaseModel):
    id: UUID
    word: str
    reading: str
    short_meaning: str
    detailed_explanation: str | None
    example_sentences: list[str]
    usage_notes: str | None
    jlpt_level: str
    index_position: int

    class Config:
        from_attributes = True


class ProgressSnapshotResponse(BaseModel):
    current_index: int
    total_words_in_level: int
    words_learned: int
    streak_days: int


class DailyWordResponse(BaseModel):
    vocabulary: VocabularyResponse
    progress: ProgressSnapshotResponse


class SkipRequest(BaseModel):
    status: Literal["known", "skipped"]


class VocabularyPage(BaseModel):
    items: list[VocabularyResponse]
    page: int
    limit: int
    total: int
    total_pages: int


def _daily_response(daily: DailyWord) -> DailyWordResponse:
    snapshot = daily.progress
    return DailyWordResponse(
        vocabulary=VocabularyResponse.model_validate(daily.vocabulary),
        progress=ProgressSnapshotResponse(
            current_index=snapshot.current_index,
            total_words_in_level=snapshot.total_words_in_level,
            words_learned=snapshot.words_learned,
            streak_days=snapshot.streak_days,
        ),
    )


def clamp_page(page: int, limit: int) -> tuple[int, int]:
    """Page floors at 1; limit is held within [1, MAX_PAGE_SIZE]."""
    return max(page, 1), min(max(limit, 1), settings.MAX_PAGE_SIZE)


@router.get("/daily", response_model=DailyWordResponse)
async def get_daily_word(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Word the user should study now, with the streak updated for today."""
    tracker = ProgressTracker(db)
    result = await tracker.get_daily_word(UUID(user_id))
    raise_result(result)
    return _daily_response(result.unwrap())


@router.get("/level/{level}", response_model=VocabularyPage)
async def list_level(
    level: JLPTLevel,
    page: int = Query(1, le=MAX_PAGE),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Words of a level in cursor order, paginated."""
    page, limit = clamp_page(page, limit)

    total_result = await count_by(db, Vocabulary, jlpt_level=level.value)
    raise_result(total_result)
    total = total_result.unwrap()

    result = await db.execute(
        select(Vocabulary)
        .where(Vocabulary.jlpt_level == level.value)
        .order_by(Vocabulary.index_position)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return VocabularyPage(
        items=[VocabularyResponse.model_validate(v) for v in result.scalars().all()],
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit),
    )


@router.get("/{vocab_id}", response_model=VocabularyResponse)
async def get_vocabulary(
    vocab_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a vocabulary item by ID."""
    result = await fetch_one(db, Vocabulary, vocab_id, "Vocabulary")
    raise_result(result)
    return result.unwrap()


@router.post("/{vocab_id}/skip", response_model=DailyWordResponse)
async def skip_word(
    vocab_id: UUID,
    body: SkipRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Mark the word known or skipped and return the next one."""
    tracker = ProgressTracker(db)
    result = await tracker.skip_word(UUID(user_id), vocab_id, VocabStatus(body.status))
    raise_result(result)
    return _daily_response(result.unwrap())
