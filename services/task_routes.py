"""Task CRUD, completion toggles and subtasks."""

from flask import jsonify, request

from backend.clock import local_now
from backend.task_service import get_task_service
from services.validation_service import COLOR_CHOICES, ICON_CHOICES, build_task_fields, parse_day_value


def handle_tasks():
    service = get_task_service()

    if request.method == 'POST':
        data = request.get_json(silent=True) or {}
        now = local_now()
        selected_day = now.date()
        if request.args.get('day'):
            selected_day = parse_day_value(request.args.get('day'))
            if not selected_day:
                return jsonify({'error': 'Invalid day'}), 400
        fields = build_task_fields(data, selected_day=selected_day, now=now)
        task = service.create_task(fields)
        return jsonify(task.to_dict()), 201

    return jsonify([snap.to_dict() for snap in service.snapshots()])


def task_detail(task_id):
    service = get_task_service()

    if request.method == 'DELETE':
        service.delete_task(task_id)
        return jsonify({'deleted': True, 'id': task_id})

    task = service.get_task(task_id)
    if request.method == 'PUT':
        data = request.get_json(silent=True) or {}
        fields = build_task_fields(data, now=local_now(), partial=True, current=task)
        task = service.update_task(task_id, fields)
    return jsonify(task.to_dict())


def toggle_task(task_id):
    task = get_task_service().toggle_completion(task_id)
    return jsonify({'id': task.id, 'is_completed': bool(task.is_completed)})


def create_subtask(task_id):
    data = request.get_json(silent=True) or {}
    subtask = get_task_service().add_subtask(task_id, data.get('title'))
    return jsonify(subtask.to_dict()), 201


def subtask_detail(subtask_id):
    service = get_task_service()
    if request.method == 'DELETE':
        service.delete_subtask(subtask_id)
        return jsonify({'deleted': True, 'id': subtask_id})
    subtask = service.toggle_subtask(subtask_id)
    return jsonify(subtask.to_dict())


def icon_choices():
    return jsonify({'icons': ICON_CHOICES, 'colors': COLOR_CHOICES})
