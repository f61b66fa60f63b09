"""Placement Test Engine

Scores a submitted answer set against the fixed question bank and maps
the per-difficulty breakdown to a JLPT level through a mastery-gated
ladder. ``PlacementEngine`` wraps the pure scoring in the persistence
steps: listing the bank with shuffled options, recording the result and
overwriting the user's level.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.logging import placement_logger
from core.errors import AppError, Ok, Result, not_found, map_db_errors
from engines.options import shuffle_options
from models.enums import JLPTLevel
from models.placement import PlacementQuestion, PlacementTestResult
from models.user import User

log = placement_logger()

# Evaluated top-down: the first level whose correct count reaches its
# threshold wins. Calibrated for a bank of 5 N5, 5 N4, 5 N3, 3 N2, 2 N1.
LEVEL_LADDER: tuple[tuple[JLPTLevel, int], ...] = (
    (JLPTLevel.N1, 2),
    (JLPTLevel.N2, 2),
    (JLPTLevel.N3, 3),
    (JLPTLevel.N4, 3),
)
FLOOR_LEVEL = JLPTLevel.N5


class ScorableQuestion(Protocol):
    id: UUID
    correct_answer: str
    difficulty_level: str


@dataclass(frozen=True, slots=True)
class PlacementScore:
    """Raw score plus correct answers per difficulty level."""
    total_score: int
    breakdown: dict[str, int]


@dataclass(frozen=True, slots=True)
class QuestionView:
    """Client-facing question: options merged and shuffled, answer withheld."""
    id: UUID
    question_text: str
    options: list[str]
    difficulty_level: str
    order_index: int


@dataclass(frozen=True, slots=True)
class PlacementOutcome:
    """Result of a graded submission."""
    score: int
    total_questions: int
    assigned_level: JLPTLevel
    breakdown: dict[str, int]


def empty_breakdown() -> dict[str, int]:
    return {level.value: 0 for level in JLPTLevel}


def score_answers(
    questions: Iterable[ScorableQuestion],
    answers: Mapping[str, str],
) -> PlacementScore:
    """Grade ``answers`` (question ID -> submitted text) against the bank.

    An answer scores only when it equals the stored correct answer exactly
    (case-sensitive, untrimmed). Unknown question IDs are ignored and
    unanswered questions contribute nothing.
    """
    bank = {str(q.id): q for q in questions}
    breakdown = empty_breakdown()
    total = 0

    for question_id, answer in answers.items():
        question = bank.get(str(question_id))
        if question is None:
            continue
        if answer == question.correct_answer:
            total += 1
            breakdown[question.difficulty_level] = breakdown.get(question.difficulty_level, 0) + 1

    return PlacementScore(total_score=total, breakdown=breakdown)


def assign_level(breakdown: Mapping[str, int]) -> JLPTLevel:
    """Map a per-level breakdown to a JLPT level via the ladder.

    Total score plays no part: a learner is placed at the hardest level
    whose own correct count clears its threshold.
    """
    for level, threshold in LEVEL_LADDER:
        if breakdown.get(level.value, 0) >= threshold:
            return level
    return FLOOR_LEVEL


class PlacementEngine:
    """Runs the placement test against the database."""

    __slots__ = ("_db",)

    def __init__(self, db: AsyncSession):
        self._db = db

    async def _load_bank(self) -> list[PlacementQuestion]:
        result = await self._db.execute(
            select(PlacementQuestion).order_by(PlacementQuestion.order_index)
        )
        return list(result.scalars().all())

    @map_db_errors("engine.placement")
    async def list_questions(self) -> Result[list[QuestionView], AppError]:
        """Question bank in presentation order, options reshuffled per call."""
        questions = await self._load_bank()
        return Ok([
            QuestionView(
                id=q.id,
                question_text=q.question_text,
                options=shuffle_options(q.correct_answer, q.wrong_answers or []),
                difficulty_level=q.difficulty_level,
                order_index=q.order_index,
            )
            for q in questions
        ])

    @map_db_errors("engine.placement")
    async def submit(
        self,
        user_id: UUID,
        answers: Mapping[str, str],
        completed_at: datetime | None = None,
    ) -> Result[PlacementOutcome, AppError]:
        """Grade a submission, append the result and overwrite the user's level."""
        user = await self._db.get(User, user_id)
        if user is None:
            return not_found("User", user_id, origin="engine.placement.submit")

        questions = await self._load_bank()
        score = score_answers(questions, answers)
        level = assign_level(score.breakdown)

        log.info(
            "placement_scored",
            user_id=str(user_id),
            score=score.total_score,
            submitted=len(answers),
            bank_size=len(questions),
            breakdown=score.breakdown,
        )

        try:
            self._db.add(PlacementTestResult(
                user_id=user_id,
                test_score=score.total_score,
                assigned_level=level.value,
                completed_at=completed_at or datetime.utcnow(),
            ))
            previous_level = user.current_level
            user.current_level = level.value
            await self._db.commit()
        except SQLAlchemyError:
            await self._db.rollback()
            raise

        log.info("level_assigned", user_id=str(user_id), previous=previous_level, assigned=level.value)
        return Ok(PlacementOutcome(
            score=score.total_score,
            total_questions=len(questions),
            assigned_level=level,
            breakdown=score.breakdown,
        ))

    @map_db_errors("engine.placement")
    async def latest_result(self, user_id: UUID) -> Result[PlacementTestResult | None, AppError]:
        """Most recent result by completion time; Ok(None) when never taken."""
        result = await self._db.execute(
            select(PlacementTestResult)
            .where(PlacementTestResult.user_id == user_id)
            .order_by(PlacementTestResult.completed_at.desc())
            .limit(1)
        )
        return Ok(result.scalar_one_or_none())
