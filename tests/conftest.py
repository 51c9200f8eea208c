import os

# Must be set before app.py is imported: it reads config at import time.
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['ENABLE_REMINDER_JOBS'] = '0'
os.environ['DEFAULT_TIMEZONE'] = 'UTC'

from datetime import date, time

import pytest

import app as app_module
from backend.task_service import TaskService
from models import db, Task


class FakeReminders:
    """Stand-in for ReminderService that records calls instead of touching APScheduler."""

    def __init__(self):
        self.scheduled = []
        self.cancelled = []

    def start(self):
        return False

    def schedule(self, task):
        self.scheduled.append(task.id)
        task.reminder_job_id = f"reminder_{task.id}"
        return True

    def cancel(self, task):
        self.cancelled.append(task.id)
        task.reminder_job_id = None


@pytest.fixture
def app():
    flask_app = app_module.app
    flask_app.config['TESTING'] = True
    real_reminders = flask_app.extensions['reminders']
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()
    flask_app.extensions['reminders'] = real_reminders


@pytest.fixture
def reminders(app):
    fake = FakeReminders()
    app.extensions['reminders'] = fake
    return fake


@pytest.fixture
def client(app, reminders):
    return app.test_client()


@pytest.fixture
def service(app, reminders):
    return TaskService(db.session, reminders)


@pytest.fixture
def make_task(app):
    def _make(title='Task', day=date(2025, 3, 10), start_time=time(9, 0), **kwargs):
        task = Task(title=title, day=day, start_time=start_time, **kwargs)
        db.session.add(task)
        db.session.commit()
        return task
    return _make
