"""Progress Tracking Engine

Serves the daily word and handles skip/advance actions for a user.
Streak and cursor arithmetic comes from ``engines.streak``; this module
turns those decisions into database writes.

All mutations for one action commit in a single transaction, and each
user's actions are serialized through a per-user lock plus a row lock on
the progress record, so concurrent skips cannot double-advance the cursor.
"""
import asyncio
from dataclasses import dataclass
from datetime import date, datetime, timezone
from uuid import UUID
from weakref import WeakValueDictionary
from zoneinfo import ZoneInfo

from sqlalchemy import distinct, select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.logging import progress_logger
from core.errors import AppError, Ok, Result, invalid_status, not_found, map_db_errors
from engines.streak import advance_cursor, advance_streak, normalize_cursor
from models.enums import JLPTLevel, VocabStatus
from models.progress import UserProgress, UserVocabStatus
from models.user import User
from models.vocabulary import Vocabulary

log = progress_logger()

# Dispositions a skip action may record, and the counter each one bumps
SKIP_COUNTERS: dict[VocabStatus, str] = {
    VocabStatus.KNOWN: "words_learned_count",
    VocabStatus.SKIPPED: "words_skipped_count",
}


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """Progress figures returned alongside a served word."""
    current_index: int
    total_words_in_level: int
    words_learned: int
    streak_days: int


@dataclass(frozen=True, slots=True)
class DailyWord:
    vocabulary: Vocabulary
    progress: ProgressSnapshot


@dataclass(frozen=True, slots=True)
class ProgressStats:
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


class UserLocks:
    """In-process lock per user ID, released for collection when unused."""

    __slots__ = ("_locks",)

    def __init__(self):
        self._locks: WeakValueDictionary[UUID, asyncio.Lock] = WeakValueDictionary()

    def for_user(self, user_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock


user_locks = UserLocks()


def study_today() -> date:
    """Current calendar date in the configured study timezone."""
    if settings.STUDY_TIMEZONE.upper() == "UTC":
        return datetime.now(timezone.utc).date()
    return datetime.now(ZoneInfo(settings.STUDY_TIMEZONE)).date()


class ProgressTracker:
    """Daily word delivery and per-user progress bookkeeping."""

    __slots__ = ("_db",)

    def __init__(self, db: AsyncSession):
        self._db = db

    async def _level_size(self, level: str) -> int:
        result = await self._db.execute(
            select(func.count()).select_from(Vocabulary).where(Vocabulary.jlpt_level == level)
        )
        return result.scalar_one()

    async def _word_at(self, level: str, index: int) -> Vocabulary | None:
        result = await self._db.execute(
            select(Vocabulary).where(
                Vocabulary.jlpt_level == level,
                Vocabulary.index_position == index,
            )
        )
        return result.scalar_one_or_none()

    async def _lock_progress(self, user_id: UUID) -> UserProgress:
        """Load the progress row FOR UPDATE, creating it if missing."""
        result = await self._db.execute(
            select(UserProgress).where(UserProgress.user_id == user_id).with_for_update()
        )
        progress = result.scalar_one_or_none()
        if progress is None:
            log.warning("progress_row_missing", user_id=str(user_id))
            progress = UserProgress(
                user_id=user_id,
                current_vocab_index=0,
                streak_days=0,
                words_learned_count=0,
                words_skipped_count=0,
            )
            self._db.add(progress)
        return progress

    async def _mark_status(self, user_id: UUID, vocab_id: UUID, status: VocabStatus) -> None:
        """Upsert the user's disposition for a word, refreshing its timestamp."""
        result = await self._db.execute(
            select(UserVocabStatus).where(
                UserVocabStatus.user_id == user_id,
                UserVocabStatus.vocab_id == vocab_id,
            )
        )
        marker = result.scalar_one_or_none()
        if marker is None:
            self._db.add(UserVocabStatus(
                user_id=user_id,
                vocab_id=vocab_id,
                status=status.value,
                marked_at=datetime.utcnow(),
            ))
        else:
            marker.status = status.value
            marker.marked_at = datetime.utcnow()

    @map_db_errors("engine.tracking")
    async def get_daily_word(self, user_id: UUID, today: date | None = None) -> Result[DailyWord, AppError]:
        """Word at the user's cursor, after applying today's streak check."""
        async with user_locks.for_user(user_id):
            user = await self._db.get(User, user_id)
            if user is None:
                return not_found("User", user_id, origin="engine.tracking.daily")

            level = user.current_level
            total = await self._level_size(level)
            if total == 0:
                return not_found("Vocabulary for level", level, origin="engine.tracking.daily")

            try:
                progress = await self._lock_progress(user_id)

                streak = advance_streak(progress.last_study_date, progress.streak_days, today or study_today())
                if streak.changed:
                    progress.streak_days = streak.streak_days
                    progress.last_study_date = streak.last_study_date

                index = normalize_cursor(progress.current_vocab_index, total)
                if index != progress.current_vocab_index:
                    log.info("cursor_normalized", user_id=str(user_id), stored=progress.current_vocab_index, level=level)
                    progress.current_vocab_index = index

                vocab = await self._word_at(level, index)
                if vocab is None:
                    await self._db.rollback()
                    return not_found("Vocabulary", f"{level}#{index}", origin="engine.tracking.daily")

                progress.last_word_id = vocab.id
                await self._db.commit()
            except SQLAlchemyError:
                await self._db.rollback()
                raise

            log.info("daily_word_served", user_id=str(user_id), level=level, index=index, streak_days=progress.streak_days)
            return Ok(DailyWord(
                vocabulary=vocab,
                progress=ProgressSnapshot(
                    current_index=index,
                    total_words_in_level=total,
                    words_learned=progress.words_learned_count,
                    streak_days=progress.streak_days,
                ),
            ))

    @map_db_errors("engine.tracking")
    async def skip_word(
        self,
        user_id: UUID,
        vocab_id: UUID,
        status: VocabStatus,
    ) -> Result[DailyWord, AppError]:
        """Mark the shown word, bump its counter and move the cursor on.

        Streaks are not touched here; only the daily fetch advances them.
        """
        if status not in SKIP_COUNTERS:
            return invalid_status(
                status.value,
                [s.value for s in SKIP_COUNTERS],
                origin="engine.tracking.skip",
            )

        async with user_locks.for_user(user_id):
            user = await self._db.get(User, user_id)
            if user is None:
                return not_found("User", user_id, origin="engine.tracking.skip")

            marked = await self._db.get(Vocabulary, vocab_id)
            if marked is None:
                return not_found("Vocabulary", vocab_id, origin="engine.tracking.skip")

            level = user.current_level
            total = await self._level_size(level)
            if total == 0:
                return not_found("Vocabulary for level", level, origin="engine.tracking.skip")

            try:
                progress = await self._lock_progress(user_id)
                current = normalize_cursor(progress.current_vocab_index, total)
                next_index = advance_cursor(current, total)

                next_vocab = await self._word_at(level, next_index)
                if next_vocab is None:
                    await self._db.rollback()
                    return not_found("Vocabulary", f"{level}#{next_index}", origin="engine.tracking.skip")

                await self._mark_status(user_id, vocab_id, status)
                counter = SKIP_COUNTERS[status]
                setattr(progress, counter, getattr(progress, counter) + 1)
                progress.current_vocab_index = next_index
                progress.last_word_id = next_vocab.id
                await self._db.commit()
            except SQLAlchemyError:
                await self._db.rollback()
                raise

            if next_index == 0:
                log.info("cursor_wrapped", user_id=str(user_id), level=level, total=total)
            log.info(
                "word_marked",
                user_id=str(user_id),
                vocab_id=str(vocab_id),
                status=status.value,
                next_index=next_index,
            )
            return Ok(DailyWord(
                vocabulary=next_vocab,
                progress=ProgressSnapshot(
                    current_index=next_index,
                    total_words_in_level=total,
                    words_learned=progress.words_learned_count,
                    streak_days=progress.streak_days,
                ),
            ))

    @map_db_errors("engine.tracking")
    async def get_stats(self, user_id: UUID) -> Result[ProgressStats, AppError]:
        """Aggregate progress figures for the user's current level."""
        user = await self._db.get(User, user_id)
        if user is None:
            return not_found("User", user_id, origin="engine.tracking.stats")

        progress = await self._db.get(UserProgress, user_id)
        if progress is None:
            return not_found("UserProgress", user_id, origin="engine.tracking.stats")

        total = await self._level_size(user.current_level)

        result = await self._db.execute(
            select(UserVocabStatus.status, func.count())
            .where(UserVocabStatus.user_id == user_id)
            .group_by(UserVocabStatus.status)
        )
        by_status = {status.value: 0 for status in VocabStatus}
        by_status.update({status: count for status, count in result.all()})

        # Words currently marked known, by the level they belong to
        result = await self._db.execute(
            select(Vocabulary.jlpt_level, func.count())
            .join(UserVocabStatus, UserVocabStatus.vocab_id == Vocabulary.id)
            .where(
                UserVocabStatus.user_id == user_id,
                UserVocabStatus.status == VocabStatus.KNOWN.value,
            )
            .group_by(Vocabulary.jlpt_level)
        )
        by_level = {level.value: 0 for level in JLPTLevel}
        by_level.update({level: count for level, count in result.all()})

        # Distinct calendar days on which the user marked at least one word
        result = await self._db.execute(
            select(func.count(distinct(func.date(UserVocabStatus.marked_at))))
            .where(UserVocabStatus.user_id == user_id)
        )
        days_active = result.scalar_one()

        return Ok(ProgressStats(
            current_vocab_index=progress.current_vocab_index,
            current_level=user.current_level,
            streak_days=progress.streak_days,
            last_study_date=progress.last_study_date,
            words_learned=progress.words_learned_count,
            words_skipped=progress.words_skipped_count,
            total_words_in_level=total,
            total_days_active=days_active,
            words_by_status=by_status,
            words_learned_by_level=by_level,
        ))
