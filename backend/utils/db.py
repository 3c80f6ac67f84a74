from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app
from pymongo import ASCENDING, MongoClient


def init_app(app, client=None):
    """Attach a MongoDB client to the app; a pre-built client wins (tests)."""
    if client is None:
        client = MongoClient(app.config["MONGO_URI"], serverSelectionTimeoutMS=2000)
    app.extensions["mongo_client"] = client

    @app.cli.command("init-db")
    def init_db_command():
        """Create the collection indexes."""
        with app.app_context():
            ensure_indexes(get_db())
        app.logger.info("Indexes created on %s", app.config["MONGO_DB_NAME"])


def get_db():
    client = current_app.extensions["mongo_client"]
    return client[current_app.config["MONGO_DB_NAME"]]


def ensure_indexes(db):
    db.users.create_index("email", unique=True)
    db.tasks.create_index([("user_id", ASCENDING), ("completed", ASCENDING)])
    db.tasks.create_index("due_date")
    db.todos.create_index([("user_id", ASCENDING), ("order", ASCENDING)])


def to_object_id(value):
    """Return an ObjectId, or None when the value is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc):
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key == "_id":
            out["id"] = str(value)
        elif key == "password_hash":
            continue
        elif isinstance(value, ObjectId):
            out[key] = str(value)
        elif isinstance(value, datetime):
            out[key] = value.isoformat()
        else:
            out[key] = value
    return out
