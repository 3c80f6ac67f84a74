from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pymongo import ReturnDocument

from backend.models.todo_model import Todo, list_todos, next_order, seed_default_todos
from backend.utils.db import get_db, serialize_doc, to_object_id
from backend.utils.validation import validate_todo


todos_bp = Blueprint("todos", __name__)


@todos_bp.get("/")
@jwt_required()
def get_todos():
    user_id = get_jwt_identity()
    db = get_db()
    docs = list_todos(db, user_id)
    if not docs:
        docs = seed_default_todos(db, user_id, current_app.config["DEFAULT_TODO_SLOTS"])
    items = [serialize_doc(d) for d in docs]
    return jsonify(items=items, count=len(items)), 200


@todos_bp.post("/")
@jwt_required()
def create_todo():
    user_id = get_jwt_identity()
    payload = request.get_json(silent=True) or {}
    clean, errors = validate_todo(payload)
    if errors:
        return jsonify(error="Validation failed", errors=errors), 400

    db = get_db()
    order = clean.get("order")
    if order is None:
        order = next_order(db, user_id)
    todo = Todo(
        user_id=user_id,
        text=clean.get("text", ""),
        completed=clean.get("completed", False),
        order=order,
    )
    res = db.todos.insert_one(todo.to_doc())
    created = db.todos.find_one({"_id": res.inserted_id})
    return jsonify(item=serialize_doc(created)), 201


# Registered before /<todo_id> so "bulk" is never read as an id.
@todos_bp.patch("/bulk")
@jwt_required()
def bulk_update_todos():
    user_id = get_jwt_identity()
    payload = request.get_json(silent=True) or {}
    todos = payload.get("todos")
    if not isinstance(todos, list):
        return jsonify(error="Todos must be an array"), 400

    db = get_db()
    updated = []
    for entry in todos:
        if not isinstance(entry, dict):
            continue
        oid = to_object_id(entry.get("id"))
        if oid is None:
            continue
        clean, errors = validate_todo(entry)
        if errors or not clean:
            continue
        clean["updated_at"] = datetime.utcnow()
        res = db.todos.find_one_and_update(
            {"_id": oid, "user_id": user_id},
            {"$set": clean},
            return_document=ReturnDocument.AFTER,
        )
        if res:
            updated.append(serialize_doc(res))
    return jsonify(items=updated, count=len(updated)), 200


@todos_bp.patch("/<todo_id>")
@jwt_required()
def update_todo(todo_id):
    oid = to_object_id(todo_id)
    if oid is None:
        return jsonify(error="Invalid id format"), 400

    payload = request.get_json(silent=True) or {}
    clean, errors = validate_todo(payload)
    if errors:
        return jsonify(error="Validation failed", errors=errors), 400
    clean["updated_at"] = datetime.utcnow()

    res = get_db().todos.find_one_and_update(
        {"_id": oid, "user_id": get_jwt_identity()},
        {"$set": clean},
        return_document=ReturnDocument.AFTER,
    )
    if not res:
        return jsonify(error="Todo not found"), 404
    return jsonify(item=serialize_doc(res)), 200


@todos_bp.delete("/<todo_id>")
@jwt_required()
def delete_todo(todo_id):
    oid = to_object_id(todo_id)
    if oid is None:
        return jsonify(error="Invalid id format"), 400
    res = get_db().todos.delete_one({"_id": oid, "user_id": get_jwt_identity()})
    if res.deleted_count == 0:
        return jsonify(error="Todo not found"), 404
    return jsonify(status="deleted", id=todo_id), 200
