import math
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from backend.models.task_model import Task
from backend.services.notifications import capture_now, task_status
from backend.utils.db import get_db, to_object_id
from backend.utils.validation import validate_task_create, validate_task_update


tasks_bp = Blueprint("tasks", __name__)

# priority is stored as text, so sorting on it would be alphabetical
SORTABLE_FIELDS = {"created_at", "updated_at", "due_date", "title"}
DEFAULT_SORT = "-created_at"


def task_response(doc, now=None):
    task = Task.from_doc(doc)
    return {**task.to_dict(), **task_status(task, now)}


def parse_sort(raw):
    raw = (raw or DEFAULT_SORT).strip()
    direction = DESCENDING if raw.startswith("-") else ASCENDING
    field = raw.lstrip("-+")
    if field not in SORTABLE_FIELDS:
        return "created_at", DESCENDING
    return field, direction


def _positive_int(raw, default):
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def load_owned_task(task_id, user_id, action):
    """Return ``(doc, None)`` or ``(None, error_response)``."""
    oid = to_object_id(task_id)
    if oid is None:
        return None, (jsonify(error="Invalid id format"), 400)
    doc = get_db().tasks.find_one({"_id": oid})
    if not doc:
        return None, (jsonify(error="Task not found"), 404)
    if doc.get("user_id") != user_id:
        current_app.logger.warning("User %s tried to %s task %s", user_id, action, task_id)
        return None, (jsonify(error=f"Not authorized to {action} this task"), 403)
    return doc, None


@tasks_bp.get("/")
@jwt_required()
def list_tasks():
    user_id = get_jwt_identity()
    query = {"user_id": user_id}
    status = request.args.get("status")
    if status == "pending":
        query["completed"] = False
    elif status == "completed":
        query["completed"] = True

    page = _positive_int(request.args.get("page"), 1)
    limit = _positive_int(request.args.get("limit"), current_app.config["TASKS_PAGE_SIZE"])
    field, direction = parse_sort(request.args.get("sort"))

    db = get_db()
    total = db.tasks.count_documents(query)
    cursor = (
        db.tasks.find(query)
        .sort([(field, direction), ("_id", direction)])
        .skip((page - 1) * limit)
        .limit(limit)
    )
    now = capture_now()
    docs = [task_response(d, now) for d in cursor]
    total_pages = math.ceil(total / limit)
    return jsonify(
        items=docs,
        count=len(docs),
        pagination={
            "current_page": page,
            "total_pages": total_pages,
            "total_items": total,
            "items_per_page": limit,
            "has_next_page": page < total_pages,
            "has_prev_page": page > 1,
        },
    ), 200


@tasks_bp.post("/")
@jwt_required()
def create_task():
    user_id = get_jwt_identity()
    payload = request.get_json(silent=True) or {}
    clean, errors = validate_task_create(payload)
    if errors:
        return jsonify(error="Validation failed", errors=errors), 400

    db = get_db()
    doc = {
        **clean,
        "completed": False,
        "user_id": user_id,
        "created_at": datetime.utcnow(),
        "updated_at": datetime.utcnow(),
    }
    res = db.tasks.insert_one(doc)
    created = db.tasks.find_one({"_id": res.inserted_id})
    return jsonify(item=task_response(created)), 201


@tasks_bp.get("/<task_id>")
@jwt_required()
def get_task(task_id):
    doc, error = load_owned_task(task_id, get_jwt_identity(), "access")
    if error:
        return error
    return jsonify(item=task_response(doc)), 200


@tasks_bp.put("/<task_id>")
@jwt_required()
def update_task(task_id):
    doc, error = load_owned_task(task_id, get_jwt_identity(), "update")
    if error:
        return error

    payload = request.get_json(silent=True) or {}
    updates, errors = validate_task_update(payload)
    if errors:
        return jsonify(error="Validation failed", errors=errors), 400
    if not updates:
        return jsonify(error="No valid fields to update"), 400
    updates["updated_at"] = datetime.utcnow()

    res = get_db().tasks.find_one_and_update(
        {"_id": doc["_id"], "user_id": doc["user_id"]},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    if not res:
        return jsonify(error="Task not found"), 404
    return jsonify(item=task_response(res)), 200


@tasks_bp.delete("/<task_id>")
@jwt_required()
def delete_task(task_id):
    doc, error = load_owned_task(task_id, get_jwt_identity(), "delete")
    if error:
        return error
    get_db().tasks.delete_one({"_id": doc["_id"]})
    return jsonify(status="deleted", id=task_id), 200
