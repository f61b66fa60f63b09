"""Progress API

Read-only view of the caller's streak, cursor and word counts.
"""
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user_id
from core.errors import raise_result
from engines.tracking import ProgressTracker

router = APIRouter()


class ProgressStatsResponse(BaseModel):
    current_vocab_index: int
    current_level: str
    streak_days: int
    last_study_date: date | None
    words_learned: int
    words_skipped: int
    total_words_in_level: int
    total_days_active: int
    words_by_status: dict[str, int]
    words_learned_by_level: dict[str, int]

    class Config:
        from_attributes = True


@router.get("", response_model=ProgressStatsResponse)
@router.get("/stats", response_model=ProgressStatsResponse)
async def get_progress(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Progress figures for the user's current level."""
    tracker = ProgressTracker(db)
    result = await tracker.get_stats(UUID(user_id))
    raise_result(result)
    return result.unwrap()
