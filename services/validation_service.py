import re
from datetime import date, datetime, time, timedelta

from backend.colors import normalize_hex
from backend.recurrence import RepeatType

TITLE_MAX_CHARS = 200
DEFAULT_DURATION_MINUTES = 15
DEFAULT_REMINDER_MINUTES = 5
FORM_DEFAULT_ICON = 'bed.double.fill'
FORM_DEFAULT_COLOR = 'F4A7B9'

ICON_CHOICES = [
    'calendar', 'book.fill', 'pencil', 'doc.fill', 'folder.fill',
    'star.fill', 'heart.fill', 'bell.fill', 'flag.fill', 'tag.fill',
]
COLOR_CHOICES = {
    'blue': '007AFF',
    'red': 'FF3B30',
    'green': '34C759',
    'orange': 'FF9500',
    'purple': 'AF52DE',
    'pink': 'FF2D55',
    'yellow': 'FFCC00',
    'gray': '8E8E93',
}


class TaskValidationError(ValueError):
    pass


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ["1", "true", "yes", "on"]


def parse_reminder_iso(value):
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value))
    except (TypeError, ValueError):
        return None
    return parsed.replace(tzinfo=None)


def parse_time_str(val):
    """Parse 24h or am/pm strings into a time object; return None on failure."""
    if not val:
        return None
    if isinstance(val, time):
        return val
    s = str(val).strip().lower().replace(" ", "")

    pattern = r"^(?P<hour>\d{1,2})(:(?P<minute>\d{1,2}))?(:(?P<second>\d{1,2}))?(?P<ampm>a|p|am|pm)?$"
    m = re.match(pattern, s)
    if not m:
        return None
    try:
        hour = int(m.group("hour"))
        minute = int(m.group("minute") or 0)
        ampm = m.group("ampm")
        if m.group("second") is not None:
            sec_val = int(m.group("second"))
            if not (0 <= sec_val <= 59):
                return None
        if ampm:
            if ampm in ("p", "pm") and hour != 12:
                hour += 12
            if ampm in ("a", "am") and hour == 12:
                hour = 0
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            return None
        return time(hour=hour, minute=minute)
    except (TypeError, ValueError):
        return None


def parse_day_value(raw):
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return datetime.strptime(str(raw), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def clean_title(raw):
    """Strip and cap a task/subtask title; anything but a non-blank string is rejected."""
    if not isinstance(raw, str) or not raw.strip():
        raise TaskValidationError('Title is required')
    return raw.strip()[:TITLE_MAX_CHARS]


def _parse_non_negative_int(raw, label):
    if isinstance(raw, bool):
        raise TaskValidationError(f'Invalid {label}')
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise TaskValidationError(f'Invalid {label}')
    if value < 0:
        raise TaskValidationError(f'{label} must not be negative')
    return value


def _minutes_between(start, end):
    delta = datetime.combine(date.min, end) - datetime.combine(date.min, start)
    return max(int(delta.total_seconds() // 60), 0)


def _resolve_reminder_time(data, day_value, start):
    raw = data.get('reminder_time')
    if raw:
        parsed = parse_reminder_iso(raw)
        if not parsed:
            raise TaskValidationError('Invalid reminder_time')
        return parsed
    minutes = data.get('reminder_minutes_before')
    minutes = DEFAULT_REMINDER_MINUTES if minutes is None else _parse_non_negative_int(minutes, 'reminder_minutes_before')
    return datetime.combine(day_value, start) - timedelta(minutes=minutes)


def build_task_fields(data, selected_day=None, now=None, partial=False, current=None):
    """
    Normalize a create/update payload into Task column values.

    With partial=True only keys present in `data` are returned; `current`
    (the task being edited) supplies day/start_time/has_reminder when the
    payload leaves them out.
    """
    data = data or {}
    now = now or datetime.now()
    fields = {}

    def given(key):
        return not partial or key in data

    if given('title'):
        fields['title'] = clean_title(data.get('title'))

    if given('day'):
        raw_day = data.get('day')
        if raw_day in (None, '') and not partial:
            fields['day'] = selected_day or now.date()
        else:
            day_value = parse_day_value(raw_day)
            if not day_value:
                raise TaskValidationError('Invalid day')
            fields['day'] = day_value

    if given('start_time'):
        raw_start = data.get('start_time')
        if raw_start in (None, '') and not partial:
            fields['start_time'] = time(hour=now.hour, minute=now.minute)
        else:
            start = parse_time_str(raw_start)
            if not start:
                raise TaskValidationError('Invalid start_time')
            fields['start_time'] = start

    day_value = fields.get('day', current.day if current is not None else None)
    start = fields.get('start_time', current.start_time if current is not None else None)

    if data.get('duration') is not None:
        fields['duration'] = _parse_non_negative_int(data.get('duration'), 'duration')
    elif data.get('end_time'):
        end = parse_time_str(data.get('end_time'))
        if not end:
            raise TaskValidationError('Invalid end_time')
        if start is None:
            raise TaskValidationError('start_time is required with end_time')
        fields['duration'] = _minutes_between(start, end)
    elif not partial:
        fields['duration'] = DEFAULT_DURATION_MINUTES

    if given('icon'):
        fields['icon'] = (str(data.get('icon') or '').strip() or FORM_DEFAULT_ICON)[:64]

    if given('icon_color'):
        raw_color = data.get('icon_color')
        fields['icon_color'] = COLOR_CHOICES.get(str(raw_color or '').lower()) or normalize_hex(raw_color, FORM_DEFAULT_COLOR)

    if given('repeat_type'):
        raw_repeat = data.get('repeat_type')
        if raw_repeat in (None, '') and not partial:
            fields['repeat_type'] = RepeatType.ONCE.value
        else:
            repeat = RepeatType.parse(raw_repeat)
            if repeat is None:
                raise TaskValidationError('Invalid repeat_type')
            fields['repeat_type'] = repeat.value

    if given('has_reminder'):
        fields['has_reminder'] = parse_bool(data.get('has_reminder'))

    reminder_keys = ('has_reminder', 'reminder_time', 'reminder_minutes_before', 'day', 'start_time')
    if not partial or any(key in data for key in reminder_keys):
        has_reminder = fields.get('has_reminder', bool(current.has_reminder) if current is not None else False)
        if has_reminder:
            fields['reminder_time'] = _resolve_reminder_time(data, day_value, start)
        else:
            fields['reminder_time'] = None

    return fields
