"""Notification views over a user's incomplete tasks.

Each handler fetches the snapshot once, captures ``now`` once and hands both
to the pure classifier in :mod:`backend.services.notifications`.
"""
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from backend.models.task_model import find_incomplete_tasks
from backend.services import notifications
from backend.utils.db import get_db


notifications_bp = Blueprint("notifications", __name__)


def _snapshot():
    return find_incomplete_tasks(get_db(), get_jwt_identity()), notifications.capture_now()


@notifications_bp.get("/notifications")
@jwt_required()
def task_notifications():
    tasks, now = _snapshot()
    summary = notifications.classify_tasks(tasks, now)
    return jsonify(summary.to_dict()), 200


@notifications_bp.get("/overdue-count")
@jwt_required()
def overdue_count():
    tasks, now = _snapshot()
    return jsonify(notifications.count_overdue(tasks, now).to_dict()), 200


@notifications_bp.get("/due-soon")
@jwt_required()
def due_soon():
    hours = notifications.sanitize_hours(
        request.args.get("hours"),
        default=current_app.config["DUE_SOON_DEFAULT_HOURS"],
    )
    tasks, now = _snapshot()
    return jsonify(notifications.tasks_due_soon(tasks, now, hours).to_dict()), 200


@notifications_bp.get("/urgent")
@jwt_required()
def urgent():
    tasks, now = _snapshot()
    return jsonify(notifications.classify_urgency(tasks, now).to_dict()), 200
