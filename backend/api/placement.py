"""Placement Test API

Lists the question bank with freshly shuffled options, grades submissions
and reports the latest result.
"""
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user_id
from core.errors import raise_result, raise_error, not_found
from engines.placement import PlacementEngine

router = APIRouter()


class QuestionResponse(BaseModel):
    """Question as shown to the learner; the answer key is never included."""
    id: UUID
    question_text: str
    options: list[str]
    difficulty_level: str
    order_index: int

    class Config:
        from_attributes = True


class PlacementSubmission(BaseModel):
    answers: dict[str, str] = Field(min_length=1)


class PlacementOutcomeResponse(BaseModel):
    score: int
    total_questions: int
    assigned_level: str
    breakdown: dict[str, int]


class PlacementResultResponse(BaseModel):
    id: UUID
    test_score: int
    assigned_level: str
    completed_at: datetime

    class Config:
        from_attributes = True


@router.get("", response_model=list[QuestionResponse])
async def list_questions(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Placement questions in order, options reshuffled on every call."""
    result = await PlacementEngine(db).list_questions()
    raise_result(result)
    return result.unwrap()


@router.post("/submit", response_model=PlacementOutcomeResponse)
async def submit_answers(
    submission: PlacementSubmission,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Grade answers and assign the resulting level."""
    result = await PlacementEngine(db).submit(UUID(user_id), submission.answers)
    raise_result(result)
    outcome = result.unwrap()
    return PlacementOutcomeResponse(
        score=outcome.score,
        total_questions=outcome.total_questions,
        assigned_level=outcome.assigned_level.value,
        breakdown=outcome.breakdown,
    )


@router.get("/result", response_model=PlacementResultResponse)
async def get_latest_result(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Most recent placement result."""
    result = await PlacementEngine(db).latest_result(UUID(user_id))
    raise_result(result)
    latest = result.unwrap()
    if latest is None:
        raise_error(not_found("PlacementTestResult", origin="api.placement.result").error)
    return latest
