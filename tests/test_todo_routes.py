def test_first_listing_seeds_blank_slots(client, auth_headers, db):
    data = client.get("/api/todos/", headers=auth_headers).get_json()
    assert data["count"] == 6
    assert [t["order"] for t in data["items"]] == list(range(6))
    assert all(t["text"] == "" and t["completed"] is False for t in data["items"])

    client.get("/api/todos/", headers=auth_headers)
    assert db.todos.count_documents({}) == 6


def test_create_appends_after_last_order(client, auth_headers):
    first = client.post("/api/todos/", json={"text": "milk"}, headers=auth_headers)
    assert first.status_code == 201
    assert first.get_json()["item"]["order"] == 0

    second = client.post("/api/todos/", json={"text": "eggs"}, headers=auth_headers)
    assert second.get_json()["item"]["order"] == 1

    explicit = client.post("/api/todos/", json={"text": "tea", "order": 10}, headers=auth_headers)
    assert explicit.get_json()["item"]["order"] == 10


def test_create_validation(client, auth_headers):
    resp = client.post("/api/todos/", json={"text": "x" * 501, "order": "1"}, headers=auth_headers)
    assert resp.status_code == 400
    assert {e["field"] for e in resp.get_json()["errors"]} == {"text", "order"}


def test_update_and_delete(client, auth_headers, other_headers):
    todo_id = client.post("/api/todos/", json={"text": "milk"}, headers=auth_headers).get_json()["item"]["id"]

    resp = client.patch(f"/api/todos/{todo_id}", json={"completed": True}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["item"]["completed"] is True
    assert resp.get_json()["item"]["text"] == "milk"

    assert client.patch(f"/api/todos/{todo_id}", json={"text": "x"}, headers=other_headers).status_code == 404
    assert client.delete(f"/api/todos/{todo_id}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/todos/{todo_id}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/todos/{todo_id}", headers=auth_headers).status_code == 404
    assert client.delete("/api/todos/bad-id", headers=auth_headers).status_code == 400


def test_bulk_reorder(client, auth_headers, other_headers):
    ids = [
        client.post("/api/todos/", json={"text": text}, headers=auth_headers).get_json()["item"]["id"]
        for text in ("a", "b")
    ]
    foreign = client.post("/api/todos/", json={"text": "z"}, headers=other_headers).get_json()["item"]["id"]

    resp = client.patch(
        "/api/todos/bulk",
        json={
            "todos": [
                {"id": ids[0], "order": 1},
                {"id": ids[1], "order": 0, "text": "b!"},
                {"id": foreign, "order": 5},
                {"id": "garbage", "order": 2},
            ]
        },
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["count"] == 2

    listed = client.get("/api/todos/", headers=auth_headers).get_json()["items"]
    assert [t["text"] for t in listed] == ["b!", "a"]


def test_bulk_requires_list(client, auth_headers):
    resp = client.patch("/api/todos/bulk", json={"todos": {}}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Todos must be an array"
