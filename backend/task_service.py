"""Write side of the task store. Routes go through TaskService for every mutation."""

from flask import current_app

from backend.day_view import TaskSnapshot, build_day_view, build_week_strip
from models import db, Notification, SubTask, Task
from services.validation_service import clean_title


class TaskNotFound(LookupError):
    pass


def get_task_service():
    """Build a TaskService bound to the current app's session and reminder service."""
    cfg = current_app.config
    return TaskService(
        db.session,
        current_app.extensions['reminders'],
        hour_range=(cfg.get('TIMELINE_START_HOUR', 8), cfg.get('TIMELINE_END_HOUR', 22)),
    )


class TaskService:

    def __init__(self, session, reminders, hour_range=(8, 22)):
        self.session = session
        self.reminders = reminders
        self.hour_range = hour_range

    def _get_task(self, task_id):
        task = self.session.get(Task, task_id)
        if task is None:
            raise TaskNotFound(f"Task {task_id} not found")
        return task

    def _get_subtask(self, subtask_id):
        subtask = self.session.get(SubTask, subtask_id)
        if subtask is None:
            raise TaskNotFound(f"Subtask {subtask_id} not found")
        return subtask

    def get_task(self, task_id):
        return self._get_task(task_id)

    def snapshots(self):
        tasks = self.session.query(Task).order_by(Task.day.asc(), Task.start_time.asc(), Task.id.asc()).all()
        return [TaskSnapshot.from_task(t) for t in tasks]

    def day_view(self, day_value):
        return build_day_view(self.snapshots(), day_value, hour_range=self.hour_range)

    def week_strip(self, day_value):
        return build_week_strip(self.snapshots(), day_value)

    def create_task(self, fields):
        task = Task(**fields)
        self.session.add(task)
        self.session.commit()
        if task.has_reminder and self.reminders.schedule(task):
            self.session.commit()
        return task

    def update_task(self, task_id, fields):
        task = self._get_task(task_id)
        for key, value in fields.items():
            setattr(task, key, value)
        self.session.commit()
        if task.has_reminder:
            self.reminders.schedule(task)
        else:
            self.reminders.cancel(task)
        self.session.commit()
        return task

    def delete_task(self, task_id):
        task = self._get_task(task_id)
        self.reminders.cancel(task)
        self.session.query(Notification).filter(Notification.task_id == task.id).update(
            {Notification.task_id: None}, synchronize_session=False
        )
        self.session.delete(task)
        self.session.commit()

    def toggle_completion(self, task_id):
        task = self._get_task(task_id)
        task.is_completed = not task.is_completed
        self.session.commit()
        return task

    def add_subtask(self, task_id, title):
        task = self._get_task(task_id)
        title = clean_title(title)
        next_order = max((s.order_index or 0 for s in task.subtasks), default=0) + 1
        subtask = SubTask(task_id=task.id, title=title, order_index=next_order)
        self.session.add(subtask)
        self.session.commit()
        return subtask

    def toggle_subtask(self, subtask_id):
        subtask = self._get_subtask(subtask_id)
        subtask.is_completed = not subtask.is_completed
        self.session.commit()
        return subtask

    def delete_subtask(self, subtask_id):
        subtask = self._get_subtask(subtask_id)
        self.session.delete(subtask)
        self.session.commit()
