"""
Read-side view state for the calendar screens.

Everything here works on immutable TaskSnapshot values copied out of the
session, so building a view never touches (or mutates) ORM rows. Callers
rebuild the view from a fresh list of snapshots after each store change.
"""

from dataclasses import dataclass, field
from datetime import date, time, timedelta

from backend.recurrence import RepeatType, should_show

DEFAULT_HOUR_RANGE = (8, 22)
WEEKDAY_LABELS = ('Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat')


@dataclass(frozen=True)
class SubTaskSnapshot:
    id: int
    title: str
    is_completed: bool

    def to_dict(self):
        return {'id': self.id, 'title': self.title, 'is_completed': self.is_completed}


@dataclass(frozen=True)
class TaskSnapshot:
    id: int
    title: str
    day: date
    start_time: time
    icon: str
    icon_color: str
    duration: int
    repeat_type: RepeatType
    has_reminder: bool
    is_completed: bool
    subtasks: tuple = ()

    @classmethod
    def from_task(cls, task):
        return cls(
            id=task.id,
            title=task.title,
            day=task.day,
            start_time=task.start_time,
            icon=task.icon,
            icon_color=task.icon_color,
            duration=task.duration or 0,
            repeat_type=task.repeat(),
            has_reminder=bool(task.has_reminder),
            is_completed=bool(task.is_completed),
            subtasks=tuple(
                SubTaskSnapshot(id=s.id, title=s.title, is_completed=bool(s.is_completed))
                for s in task.subtasks
            ),
        )

    def shows_on(self, day_value):
        return should_show(self.day, self.repeat_type, day_value)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'day': self.day.isoformat(),
            'start_time': self.start_time.strftime('%H:%M'),
            'icon': self.icon,
            'icon_color': self.icon_color,
            'duration': self.duration,
            'repeat_type': self.repeat_type.value,
            'has_reminder': self.has_reminder,
            'is_completed': self.is_completed,
            'subtasks': [s.to_dict() for s in self.subtasks],
        }


@dataclass(frozen=True)
class HourRow:
    hour: int
    tasks: tuple

    @property
    def label(self):
        return f"{self.hour:02d}:00"

    def to_dict(self):
        return {'hour': self.hour, 'label': self.label, 'tasks': [t.to_dict() for t in self.tasks]}


@dataclass(frozen=True)
class DayView:
    day: date
    tasks: tuple
    timeline: tuple = field(default=())

    @property
    def month_title(self):
        return self.day.strftime('%B %Y')

    def to_dict(self):
        return {
            'day': self.day.isoformat(),
            'month_title': self.month_title,
            'tasks': [t.to_dict() for t in self.tasks],
            'timeline': [row.to_dict() for row in self.timeline],
        }


@dataclass(frozen=True)
class WeekDay:
    day: date
    weekday_label: str
    is_selected: bool
    task_count: int

    @property
    def day_number(self):
        return self.day.day

    def to_dict(self):
        return {
            'day': self.day.isoformat(),
            'weekday_label': self.weekday_label,
            'day_number': self.day_number,
            'is_selected': self.is_selected,
            'task_count': self.task_count,
        }


def _sort_key(snapshot):
    return (snapshot.start_time, snapshot.title, snapshot.id)


def tasks_for_day(snapshots, day_value):
    """Snapshots visible on `day_value`, earliest start time first."""
    return sorted((s for s in snapshots if s.shows_on(day_value)), key=_sort_key)


def build_day_view(snapshots, selected_day, hour_range=DEFAULT_HOUR_RANGE):
    visible = tasks_for_day(snapshots, selected_day)
    first_hour, last_hour = hour_range

    by_hour = {}
    for snap in visible:
        hour = snap.start_time.hour
        if first_hour <= hour <= last_hour:
            by_hour.setdefault(hour, []).append(snap)

    timeline = tuple(HourRow(hour=h, tasks=tuple(by_hour[h])) for h in sorted(by_hour))
    return DayView(day=selected_day, tasks=tuple(visible), timeline=timeline)


def week_start(day_value):
    """Sunday that opens the week containing `day_value`."""
    return day_value - timedelta(days=(day_value.weekday() + 1) % 7)


def build_week_strip(snapshots, selected_day):
    start = week_start(selected_day)
    days = []
    for offset in range(7):
        current = start + timedelta(days=offset)
        days.append(WeekDay(
            day=current,
            weekday_label=WEEKDAY_LABELS[offset],
            is_selected=current == selected_day,
            task_count=sum(1 for s in snapshots if s.shows_on(current)),
        ))
    return tuple(days)


def shift_day(day_value, days=1):
    return day_value + timedelta(days=days)


def shift_week(day_value, weeks=1):
    return day_value + timedelta(days=7 * weeks)
