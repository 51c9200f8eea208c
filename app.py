import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

load_dotenv()

from models import db
from backend.reminders import ReminderService
from backend.task_service import TaskNotFound
from services import calendar_routes, notification_routes, task_routes
from services.validation_service import TaskValidationError

MEMORY_DATABASE_URI = 'sqlite://'

app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///daystrip.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
app.config['DEFAULT_TIMEZONE'] = os.environ.get('DEFAULT_TIMEZONE', 'UTC')
app.config['ENABLE_REMINDER_JOBS'] = os.environ.get('ENABLE_REMINDER_JOBS', '1') == '1'
app.config['TIMELINE_START_HOUR'] = int(os.environ.get('TIMELINE_START_HOUR', 8))
app.config['TIMELINE_END_HOUR'] = int(os.environ.get('TIMELINE_END_HOUR', 22))


def _absolute_sqlite_uri(uri):
    """Anchor relative SQLite paths in the instance folder, as Flask-SQLAlchemy does."""
    url = make_url(uri)
    if not url.drivername.startswith('sqlite') or url.database in (None, '', ':memory:'):
        return uri
    if os.path.isabs(url.database):
        return uri
    os.makedirs(app.instance_path, exist_ok=True)
    return url.set(database=os.path.join(app.instance_path, url.database)).render_as_string(hide_password=False)


def _resolve_database_uri(uri):
    """Return `uri` if its schema can be created, else fall back to an in-memory store."""
    if uri == MEMORY_DATABASE_URI:
        return uri
    engine = None
    try:
        uri = _absolute_sqlite_uri(uri)
        engine = create_engine(uri)
        with engine.connect() as conn:
            conn.execute(text('SELECT 1'))
        db.metadata.create_all(engine)
        return uri
    except (SQLAlchemyError, OSError) as e:
        app.logger.error(f"Failed to initialize database {uri}: {e}")
        app.logger.warning("Falling back to in-memory storage; data will not persist")
        return MEMORY_DATABASE_URI
    finally:
        if engine is not None:
            engine.dispose()


app.config['SQLALCHEMY_DATABASE_URI'] = _resolve_database_uri(app.config['SQLALCHEMY_DATABASE_URI'])
db.init_app(app)
ReminderService(app)

with app.app_context():
    db.create_all()


_jobs_bootstrapped = False

@app.before_request
def _bootstrap_background_jobs():
    global _jobs_bootstrapped
    if _jobs_bootstrapped:
        return
    app.extensions['reminders'].start()
    _jobs_bootstrapped = True


@app.errorhandler(TaskValidationError)
def _handle_validation_error(e):
    return jsonify({'error': str(e)}), 400


@app.errorhandler(TaskNotFound)
def _handle_not_found(e):
    return jsonify({'error': str(e)}), 404


@app.errorhandler(404)
def _handle_404(e):
    return jsonify({'error': 'Not found'}), 404


# Tasks API
app.add_url_rule('/api/tasks', view_func=task_routes.handle_tasks, methods=['GET', 'POST'])
app.add_url_rule('/api/tasks/<int:task_id>', view_func=task_routes.task_detail, methods=['GET', 'PUT', 'DELETE'])
app.add_url_rule('/api/tasks/<int:task_id>/toggle', view_func=task_routes.toggle_task, methods=['POST'])
app.add_url_rule('/api/tasks/<int:task_id>/subtasks', view_func=task_routes.create_subtask, methods=['POST'])
app.add_url_rule('/api/subtasks/<int:subtask_id>', view_func=task_routes.subtask_detail, methods=['DELETE'])
app.add_url_rule('/api/subtasks/<int:subtask_id>/toggle', view_func=task_routes.subtask_detail,
                 endpoint='toggle_subtask', methods=['POST'])
app.add_url_rule('/api/icons', view_func=task_routes.icon_choices)

# Calendar API
app.add_url_rule('/api/calendar/day', view_func=calendar_routes.day_view)
app.add_url_rule('/api/calendar/week', view_func=calendar_routes.week_view)
app.add_url_rule('/api/calendar/navigate', view_func=calendar_routes.navigate)

# Notifications API
app.add_url_rule('/api/notifications', view_func=notification_routes.list_notifications)
app.add_url_rule('/api/notifications/<int:notification_id>/read',
                 view_func=notification_routes.mark_notification_read, methods=['POST'])


if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1')
