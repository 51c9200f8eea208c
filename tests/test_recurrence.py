from datetime import date, datetime, timedelta

import pytest

from backend.recurrence import RepeatType, should_show

ALL_TYPES = list(RepeatType)


def _days(start, end):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


@pytest.mark.parametrize('repeat', ALL_TYPES)
def test_other_year_is_never_shown(repeat):
    anchor = date(2025, 12, 31)
    assert not should_show(anchor, repeat, date(2026, 1, 1))
    assert not should_show(anchor, repeat, date(2026, 12, 31))
    assert not should_show(anchor, repeat, date(2024, 12, 31))


@pytest.mark.parametrize('repeat', ALL_TYPES)
def test_days_before_anchor_are_never_shown(repeat):
    anchor = date(2025, 6, 15)
    for day_value in _days(date(2025, 1, 1), date(2025, 6, 14)):
        assert not should_show(anchor, repeat, day_value)


def test_once_only_on_anchor_day():
    anchor = date(2025, 4, 2)
    assert should_show(anchor, RepeatType.ONCE, anchor)
    assert not should_show(anchor, RepeatType.ONCE, anchor + timedelta(days=1))
    assert not should_show(anchor, RepeatType.ONCE, anchor + timedelta(days=7))


def test_daily_covers_rest_of_year():
    anchor = date(2025, 9, 20)
    for day_value in _days(anchor, date(2025, 12, 31)):
        assert should_show(anchor, RepeatType.DAILY, day_value)


def test_weekly_matches_weekday():
    monday = date(2025, 1, 6)
    assert should_show(monday, RepeatType.WEEKLY, monday + timedelta(days=7))
    assert should_show(monday, RepeatType.WEEKLY, monday + timedelta(days=14))
    assert not should_show(monday, RepeatType.WEEKLY, monday + timedelta(days=1))


def test_monthly_matches_day_of_month():
    anchor = date(2025, 3, 15)
    assert should_show(anchor, RepeatType.MONTHLY, date(2025, 4, 15))
    for month in range(1, 13):
        assert not should_show(anchor, RepeatType.MONTHLY, date(2025, month, 16))


def test_monthly_has_no_end_of_month_rollover():
    anchor = date(2025, 1, 31)
    assert should_show(anchor, RepeatType.MONTHLY, date(2025, 3, 31))
    assert not should_show(anchor, RepeatType.MONTHLY, date(2025, 4, 30))
    assert not any(should_show(anchor, RepeatType.MONTHLY, d) for d in _days(date(2025, 2, 1), date(2025, 2, 28)))


def test_custom_behaves_like_once():
    anchor = date(2025, 5, 10)
    for day_value in _days(date(2025, 1, 1), date(2025, 12, 31)):
        assert should_show(anchor, RepeatType.CUSTOM, day_value) == should_show(anchor, RepeatType.ONCE, day_value)


def test_time_of_day_is_ignored():
    anchor = datetime(2025, 5, 10, 23, 30)
    assert should_show(anchor, RepeatType.ONCE, datetime(2025, 5, 10, 0, 5))
    assert should_show(anchor, 'daily', datetime(2025, 5, 11, 6, 0))


def test_string_and_unknown_repeat_values():
    anchor = date(2025, 5, 10)
    assert should_show(anchor, 'WEEKLY', date(2025, 5, 17))
    assert RepeatType.parse('bogus') is None
    # Unknown stored values evaluate as a one-off task.
    assert should_show(anchor, 'bogus', anchor)
    assert not should_show(anchor, 'bogus', date(2025, 5, 11))
