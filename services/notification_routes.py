"""Delivered reminder notifications."""

from datetime import datetime

from flask import jsonify, request

from models import db, Notification
from services.validation_service import parse_bool


def list_notifications():
    query = Notification.query
    if parse_bool(request.args.get('unread')):
        query = query.filter(Notification.read_at.is_(None))
    notes = query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()
    return jsonify([n.to_dict() for n in notes])


def mark_notification_read(notification_id):
    note = db.get_or_404(Notification, notification_id)
    if not note.read_at:
        note.read_at = datetime.utcnow()
        db.session.commit()
    return jsonify(note.to_dict())
