"""Calendar read endpoints: per-day timeline, week strip and day/week navigation."""

from flask import jsonify, request

from backend.clock import local_today
from backend.day_view import shift_day, shift_week
from backend.task_service import get_task_service
from services.validation_service import parse_day_value


def _selected_day():
    raw = request.args.get('day')
    if not raw:
        return local_today()
    return parse_day_value(raw)


def day_view():
    day_obj = _selected_day()
    if not day_obj:
        return jsonify({'error': 'Invalid day'}), 400
    return jsonify(get_task_service().day_view(day_obj).to_dict())


def week_view():
    day_obj = _selected_day()
    if not day_obj:
        return jsonify({'error': 'Invalid day'}), 400
    days = get_task_service().week_strip(day_obj)
    return jsonify({
        'selected_day': day_obj.isoformat(),
        'month_title': day_obj.strftime('%B %Y'),
        'days': [d.to_dict() for d in days]
    })


def navigate():
    """Move the selection one day (swipe) or one week (week strip swipe) back or forward."""
    day_obj = _selected_day()
    if not day_obj:
        return jsonify({'error': 'Invalid day'}), 400

    direction = (request.args.get('direction') or 'next').lower()
    unit = (request.args.get('unit') or 'day').lower()
    if direction not in ('prev', 'next'):
        return jsonify({'error': 'direction must be prev or next'}), 400
    if unit not in ('day', 'week'):
        return jsonify({'error': 'unit must be day or week'}), 400

    step = -1 if direction == 'prev' else 1
    new_day = shift_week(day_obj, step) if unit == 'week' else shift_day(day_obj, step)

    service = get_task_service()
    return jsonify({
        'selected_day': new_day.isoformat(),
        'day_view': service.day_view(new_day).to_dict(),
        'week': [d.to_dict() for d in service.week_strip(new_day)]
    })
