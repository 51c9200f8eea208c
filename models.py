from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, date

from backend.colors import DEFAULT_ICON_COLOR
from backend.recurrence import RepeatType

db = SQLAlchemy()


class Task(db.Model):
    """
    A scheduled task anchored on `day`. Repeating tasks keep a single row;
    which days they appear on is decided by backend.recurrence.should_show.
    All dates/times are naive values in the server's DEFAULT_TIMEZONE.
    """
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    day = db.Column(db.Date, nullable=False, default=date.today)
    start_time = db.Column(db.Time, nullable=False)
    icon = db.Column(db.String(64), nullable=False, default='calendar')
    icon_color = db.Column(db.String(6), nullable=False, default=DEFAULT_ICON_COLOR)
    duration = db.Column(db.Integer, nullable=False, default=15)  # minutes
    repeat_type = db.Column(db.String(20), nullable=False, default=RepeatType.ONCE.value)
    has_reminder = db.Column(db.Boolean, default=False)
    reminder_time = db.Column(db.DateTime, nullable=True)
    reminder_job_id = db.Column(db.String(100), nullable=True)
    is_completed = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    subtasks = db.relationship(
        'SubTask',
        backref='task',
        lazy=True,
        cascade="all, delete-orphan",
        order_by="SubTask.order_index"
    )

    def repeat(self):
        return RepeatType.parse(self.repeat_type, RepeatType.ONCE)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'day': self.day.isoformat() if self.day else None,
            'start_time': self.start_time.strftime('%H:%M') if self.start_time else None,
            'icon': self.icon,
            'icon_color': self.icon_color,
            'duration': self.duration,
            'repeat_type': self.repeat().value,
            'has_reminder': bool(self.has_reminder),
            'reminder_time': self.reminder_time.isoformat() if self.reminder_time else None,
            'is_completed': bool(self.is_completed),
            'subtasks': [s.to_dict() for s in self.subtasks],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class SubTask(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('task.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    is_completed = db.Column(db.Boolean, default=False)
    order_index = db.Column(db.Integer, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'task_id': self.task_id,
            'title': self.title,
            'is_completed': bool(self.is_completed),
            'order_index': self.order_index,
        }


class Notification(db.Model):
    """Delivered reminder record."""
    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('task.id', ondelete='SET NULL'), nullable=True)
    title = db.Column(db.String(200), nullable=False)
    body = db.Column(db.Text, nullable=True)
    read_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'task_id': self.task_id,
            'title': self.title,
            'body': self.body,
            'read_at': self.read_at.isoformat() if self.read_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
