"""Repeat rules for tasks: decides which calendar days a task shows up on."""

from datetime import datetime
from enum import Enum


class RepeatType(str, Enum):
    ONCE = 'once'
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    # Stored and selectable, but evaluated exactly like ONCE for now.
    CUSTOM = 'custom'

    @classmethod
    def parse(cls, raw, default=None):
        """Map a stored/request value onto a RepeatType; unknown values fall back to `default`."""
        if isinstance(raw, cls):
            return raw
        value = str(raw or '').strip().lower()
        for member in cls:
            if member.value == value:
                return member
        return default


def _as_day(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def should_show(anchor_date, repeat_type, query_date):
    """Return True when a task anchored on `anchor_date` appears on `query_date`.

    Recurrence never crosses a year boundary and never reaches back before the
    anchor day.
    """
    anchor = _as_day(anchor_date)
    day_value = _as_day(query_date)
    repeat = RepeatType.parse(repeat_type, RepeatType.ONCE)

    if day_value.year != anchor.year:
        return False
    if day_value < anchor:
        return False

    if repeat == RepeatType.DAILY:
        return True
    if repeat == RepeatType.WEEKLY:
        return day_value.weekday() == anchor.weekday()
    if repeat == RepeatType.MONTHLY:
        # No clamping: day 31 never matches a 30-day month.
        return day_value.day == anchor.day
    if repeat in (RepeatType.ONCE, RepeatType.CUSTOM):
        return day_value == anchor
    return False
