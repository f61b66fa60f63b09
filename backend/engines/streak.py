"""Study Streak and Word Cursor Engine

Pure day-boundary and ring-buffer arithmetic behind the daily word.
Callers persist the returned values; nothing here touches the database.

Streak transitions, by whole calendar days since the last study date:
    no prior date -> 1
    0             -> unchanged (same-day re-entry)
    1             -> streak + 1
    > 1           -> 1
    < 0           -> unchanged (clock skew or backdated request)
"""
from dataclasses import dataclass
from datetime import date, datetime

from core.logging import progress_logger

log = progress_logger()


@dataclass(frozen=True, slots=True)
class StreakUpdate:
    """Outcome of a streak check."""
    streak_days: int
    last_study_date: date
    changed: bool


def to_calendar_date(value: date | datetime) -> date:
    """Strip time-of-day, keeping the calendar date of ``value``."""
    if isinstance(value, datetime):
        return value.date()
    return value


def advance_streak(
    last_study_date: date | datetime | None,
    current_streak: int,
    today: date | datetime,
) -> StreakUpdate:
    """Apply one study-day check to a streak.

    Must run once per daily-word fetch, before the word is served.
    """
    today = to_calendar_date(today)

    if last_study_date is None:
        log.debug("streak_started", today=today.isoformat())
        return StreakUpdate(streak_days=1, last_study_date=today, changed=True)

    last = to_calendar_date(last_study_date)
    days_diff = (today - last).days

    if days_diff == 0:
        return StreakUpdate(streak_days=current_streak, last_study_date=last, changed=False)

    if days_diff < 0:
        log.warning(
            "streak_clock_skew",
            last_study_date=last.isoformat(),
            today=today.isoformat(),
            days_diff=days_diff,
        )
        return StreakUpdate(streak_days=current_streak, last_study_date=last, changed=False)

    if days_diff == 1:
        new_streak = current_streak + 1
        log.debug("streak_advanced", streak_days=new_streak)
        return StreakUpdate(streak_days=new_streak, last_study_date=today, changed=True)

    log.debug("streak_reset", previous=current_streak, gap_days=days_diff)
    return StreakUpdate(streak_days=1, last_study_date=today, changed=True)


def advance_cursor(current_index: int, total_words_in_level: int) -> int:
    """Next position in a level's word list, wrapping to 0 past the end."""
    if total_words_in_level < 1:
        raise ValueError("total_words_in_level must be at least 1")

    next_index = current_index + 1
    if next_index >= total_words_in_level:
        return 0
    return next_index


def normalize_cursor(index: int, total_words_in_level: int) -> int:
    """Clamp a stored cursor into ``[0, total)``; out-of-range values wrap to 0."""
    if total_words_in_level < 1:
        raise ValueError("total_words_in_level must be at least 1")

    if 0 <= index < total_words_in_level:
        return index
    return 0
