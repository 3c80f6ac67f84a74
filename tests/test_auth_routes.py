from conftest import signup


def test_signup_returns_token_and_hides_hash(client, db):
    item = signup(client, email="  Ada@Example.com ")
    assert item["email"] == "ada@example.com"
    assert item["token"]
    assert "password_hash" not in item

    stored = db.users.find_one({"email": "ada@example.com"})
    assert stored["password_hash"] != "secret1"


def test_signup_rejects_duplicate_email(client, user):
    resp = client.post(
        "/api/auth/signup",
        json={"name": "Ada", "email": "ada@example.com", "password": "secret1"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "User already exists with this email"


def test_signup_validation_errors(client):
    resp = client.post(
        "/api/auth/signup",
        json={"name": "A", "email": "not-an-email", "password": "secret"},
    )
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.get_json()["errors"]}
    assert fields == {"name", "email", "password"}


def test_login(client, user):
    resp = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret1"})
    assert resp.status_code == 200
    assert resp.get_json()["item"]["id"] == user["id"]


def test_login_with_wrong_password(client, user):
    resp = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "wrong1"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid credentials"


def test_login_unknown_user(client):
    resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret1"})
    assert resp.status_code == 401


def test_me(client, user, auth_headers):
    resp = client.get("/api/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    item = resp.get_json()["item"]
    assert item["id"] == user["id"]
    assert item["name"] == "Ada"
    assert "password_hash" not in item


def test_me_requires_token(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Not authorized, no token"


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_unknown_route_returns_json(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not Found"}
