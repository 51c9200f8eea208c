"""Reminder dispatch for tasks, backed by an APScheduler BackgroundScheduler."""

import os
from datetime import datetime

import pytz
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

from models import db, Task, Notification

REMINDER_TITLE = 'Task reminder'


class ReminderService:
    """
    Schedules one 'date' job per task with a reminder. The instance is built
    in app.py and handed to whatever needs it (TaskService, routes through
    app.extensions['reminders']); nothing reaches for a module-level scheduler.
    """

    def __init__(self, app=None, scheduler=None, timezone=None, clock=None):
        self.app = app
        self.scheduler = scheduler
        self.timezone = timezone
        self._clock = clock
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        if self.timezone is None:
            self.timezone = app.config.get('DEFAULT_TIMEZONE', 'UTC')
        app.extensions['reminders'] = self

    @property
    def tz(self):
        return pytz.timezone(self.timezone or 'UTC')

    def now(self):
        if self._clock:
            return self._clock()
        return datetime.now(self.tz)

    @staticmethod
    def job_id_for(task):
        return f"reminder_{task.id}"

    def start(self):
        """Start the background scheduler unless jobs are disabled or it's already up."""
        app = self.app
        if not app.config.get('ENABLE_REMINDER_JOBS', True):
            return False
        if self.scheduler is not None and self.scheduler.running:
            return False
        # Avoid double-start in Flask debug reloader
        if app.debug and os.environ.get('WERKZEUG_RUN_MAIN') != 'true':
            return False
        if self.scheduler is None:
            self.scheduler = BackgroundScheduler(timezone=self.tz)
        self.scheduler.start()
        app.logger.info(f"Reminder scheduler started ({self.timezone})")
        self.reschedule_pending()
        return True

    def reschedule_pending(self):
        """Re-queue stored reminders; jobs live in memory and are gone after a restart."""
        scheduled_count = 0
        with self.app.app_context():
            try:
                tasks = Task.query.filter(
                    Task.has_reminder.is_(True),
                    Task.reminder_time.isnot(None),
                    Task.is_completed.isnot(True)
                ).all()
                for task in tasks:
                    try:
                        if self.schedule(task):
                            scheduled_count += 1
                        else:
                            task.reminder_job_id = None
                    except Exception as e:
                        self.app.logger.error(f"Error scheduling reminder for task {task.id}: {e}")
                db.session.commit()
            except Exception as e:
                db.session.rollback()
                self.app.logger.error(f"Error in reschedule_pending: {e}")
        self.app.logger.info(f"Rescheduled {scheduled_count} stored reminders")
        return scheduled_count

    def shutdown(self):
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def schedule(self, task):
        """Queue a reminder for `task`; returns True when a job was added. Caller commits."""
        if self.scheduler is None:
            return False
        if task.reminder_job_id:
            self.cancel(task)
        if not task.has_reminder or not task.reminder_time:
            return False

        try:
            reminder_at = self.tz.localize(task.reminder_time)
            if reminder_at <= self.now():
                self.app.logger.debug(f"Reminder for task {task.id} is in the past, not scheduling")
                return False
            job_id = self.job_id_for(task)
            self.scheduler.add_job(
                self.deliver,
                'date',
                run_date=reminder_at,
                args=[task.id],
                id=job_id,
                replace_existing=True
            )
            task.reminder_job_id = job_id
            self.app.logger.info(f"Scheduled reminder {job_id} at {reminder_at.isoformat()}")
            return True
        except Exception as e:
            self.app.logger.error(f"Error scheduling reminder for task {task.id}: {e}")
            return False

    def cancel(self, task):
        """Drop the pending reminder job for `task`, if any. Caller commits."""
        if self.scheduler is not None and task.reminder_job_id:
            try:
                self.scheduler.remove_job(task.reminder_job_id)
                self.app.logger.info(f"Cancelled reminder job {task.reminder_job_id} for task {task.id}")
            except JobLookupError as e:
                self.app.logger.debug(f"Could not cancel job {task.reminder_job_id}: {e}")
        task.reminder_job_id = None

    def deliver(self, task_id):
        """Job body: record a reminder notification for the task."""
        with self.app.app_context():
            try:
                task = db.session.get(Task, task_id)
                if not task:
                    return None
                note = Notification(task_id=task.id, title=REMINDER_TITLE, body=task.title)
                db.session.add(note)
                task.reminder_job_id = None
                db.session.commit()
                self.app.logger.info(f"Delivered reminder for task {task_id}")
                return note.id
            except Exception as e:
                db.session.rollback()
                self.app.logger.error(f"Error sending reminder for task {task_id}: {e}")
                return None
