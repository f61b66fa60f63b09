"""Tests for streak and cursor arithmetic."""
from datetime import date, datetime

import pytest

from engines.streak import advance_cursor, advance_streak, normalize_cursor

DAY = date(2024, 3, 10)


def test_first_study_day_starts_streak():
    update = advance_streak(None, 0, DAY)
    assert update.streak_days == 1
    assert update.last_study_date == DAY
    assert update.changed


def test_same_day_is_idempotent():
    update = advance_streak(DAY, 4, DAY)
    assert update.streak_days == 4
    assert update.last_study_date == DAY
    assert not update.changed


def test_consecutive_day_increments():
    update = advance_streak(DAY, 4, date(2024, 3, 11))
    assert update.streak_days == 5
    assert update.last_study_date == date(2024, 3, 11)


def test_gap_resets_to_one():
    update = advance_streak(DAY, 9, date(2024, 3, 13))
    assert update.streak_days == 1
    assert update.last_study_date == date(2024, 3, 13)


def test_date_in_past_leaves_streak_alone():
    update = advance_streak(DAY, 3, date(2024, 3, 8))
    assert update.streak_days == 3
    assert update.last_study_date == DAY
    assert not update.changed


def test_time_of_day_is_ignored():
    late = datetime(2024, 3, 10, 23, 59)
    early = datetime(2024, 3, 11, 0, 1)
    assert advance_streak(late, 2, early).streak_days == 3
    assert advance_streak(datetime(2024, 3, 10, 1, 0), 2, late).streak_days == 2


def test_month_boundary_counts_as_consecutive():
    assert advance_streak(date(2024, 2, 29), 1, date(2024, 3, 1)).streak_days == 2


@pytest.mark.parametrize("total", [1, 2, 5, 12])
def test_cursor_stays_in_range(total):
    for i in range(total):
        nxt = advance_cursor(i, total)
        assert 0 <= nxt < total
        assert nxt == (i + 1 if i + 1 < total else 0)


def test_cursor_cycles_back_after_full_pass():
    index = 0
    for _ in range(5):
        index = advance_cursor(index, 5)
    assert index == 0


def test_cursor_rejects_empty_level():
    with pytest.raises(ValueError):
        advance_cursor(0, 0)


def test_normalize_cursor():
    assert normalize_cursor(3, 5) == 3
    assert normalize_cursor(11, 5) == 0
    assert normalize_cursor(-1, 5) == 0
    with pytest.raises(ValueError):
        normalize_cursor(0, 0)
