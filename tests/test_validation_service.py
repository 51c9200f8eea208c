from datetime import date, datetime, time
from types import SimpleNamespace

import pytest

from services.validation_service import (
    FORM_DEFAULT_COLOR,
    FORM_DEFAULT_ICON,
    TaskValidationError,
    build_task_fields,
    parse_time_str,
)

NOW = datetime(2025, 3, 10, 14, 37, 12)


def test_defaults_follow_selected_day_and_current_time():
    fields = build_task_fields({'title': '  Read  '}, selected_day=date(2025, 3, 12), now=NOW)
    assert fields['title'] == 'Read'
    assert fields['day'] == date(2025, 3, 12)
    assert fields['start_time'] == time(14, 37)
    assert fields['duration'] == 15
    assert fields['icon'] == FORM_DEFAULT_ICON
    assert fields['icon_color'] == FORM_DEFAULT_COLOR
    assert fields['repeat_type'] == 'once'
    assert fields['has_reminder'] is False
    assert fields['reminder_time'] is None


def test_title_is_required():
    with pytest.raises(TaskValidationError):
        build_task_fields({'title': '   '}, now=NOW)


def test_duration_from_end_time():
    fields = build_task_fields({'title': 'Run', 'start_time': '07:30', 'end_time': '08:15'}, now=NOW)
    assert fields['duration'] == 45
    fields = build_task_fields({'title': 'Run', 'start_time': '07:30', 'end_time': '07:00'}, now=NOW)
    assert fields['duration'] == 0


def test_invalid_values_raise():
    with pytest.raises(TaskValidationError):
        build_task_fields({'title': 'x', 'day': '2025-13-01'}, now=NOW)
    with pytest.raises(TaskValidationError):
        build_task_fields({'title': 'x', 'repeat_type': 'yearly'}, now=NOW)
    with pytest.raises(TaskValidationError):
        build_task_fields({'title': 'x', 'duration': -5}, now=NOW)


def test_color_names_and_hex():
    assert build_task_fields({'title': 'x', 'icon_color': 'green'}, now=NOW)['icon_color'] == '34C759'
    assert build_task_fields({'title': 'x', 'icon_color': '#abc'}, now=NOW)['icon_color'] == 'AABBCC'
    assert build_task_fields({'title': 'x', 'icon_color': 'nope'}, now=NOW)['icon_color'] == FORM_DEFAULT_COLOR


def test_reminder_defaults_to_five_minutes_before_start():
    fields = build_task_fields(
        {'title': 'Call', 'day': '2025-03-11', 'start_time': '9:00', 'has_reminder': True},
        now=NOW,
    )
    assert fields['reminder_time'] == datetime(2025, 3, 11, 8, 55)

    fields = build_task_fields(
        {'title': 'Call', 'day': '2025-03-11', 'start_time': '9:00', 'has_reminder': 'yes',
         'reminder_time': '2025-03-11T07:00:00'},
        now=NOW,
    )
    assert fields['reminder_time'] == datetime(2025, 3, 11, 7, 0)


def test_partial_update_only_returns_given_keys():
    current = SimpleNamespace(day=date(2025, 3, 10), start_time=time(9, 0), has_reminder=True)
    fields = build_task_fields({'start_time': '10:00'}, now=NOW, partial=True, current=current)
    assert fields['start_time'] == time(10, 0)
    assert fields['reminder_time'] == datetime(2025, 3, 10, 9, 55)
    assert 'title' not in fields
    assert 'duration' not in fields

    fields = build_task_fields({'end_time': '09:20'}, now=NOW, partial=True, current=current)
    assert fields == {'duration': 20}


def test_parse_time_str_formats():
    assert parse_time_str('7pm') == time(19, 0)
    assert parse_time_str('12:30am') == time(0, 30)
    assert parse_time_str('25:00') is None
