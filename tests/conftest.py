from datetime import date, datetime, time, timedelta

import mongomock
import pytest

from backend.app import create_app
from backend.utils.db import ensure_indexes

TEST_CONFIG = {
    "TESTING": True,
    "JWT_SECRET_KEY": "test-jwt-secret-with-at-least-32-characters",
    "MONGO_DB_NAME": "taskboard_test",
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG, mongo_client=mongomock.MongoClient())
    ensure_indexes(app.extensions["mongo_client"][app.config["MONGO_DB_NAME"]])
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return app.extensions["mongo_client"][app.config["MONGO_DB_NAME"]]


def signup(client, email="ada@example.com", password="secret1", name="Ada"):
    resp = client.post(
        "/api/auth/signup",
        json={"name": name, "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["item"]


@pytest.fixture
def user(client):
    return signup(client)


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {user['token']}"}


@pytest.fixture
def other_headers(client):
    other = signup(client, email="grace@example.com", name="Grace")
    return {"Authorization": f"Bearer {other['token']}"}


def day_offset(days):
    return date.today() + timedelta(days=days)


def task_doc(user_id, day, due_time=None, completed=False, title="task"):
    """Raw task document, bypassing request validation."""
    return {
        "title": title,
        "description": None,
        "priority": "medium",
        "due_date": datetime.combine(day, time.min),
        "due_time": due_time,
        "completed": completed,
        "user_id": user_id,
        "created_at": datetime.utcnow(),
        "updated_at": datetime.utcnow(),
    }
