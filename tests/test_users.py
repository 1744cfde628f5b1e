from sqlmodel import Session

from accounting_app.models.user import User


def test_list_users_starts_empty(client):
    response = client.get("/users")
    assert response.status_code == 200
    assert response.json() == []


def test_create_user_keeps_name_as_given(client):
    response = client.post("/users", json={"name": "  Alice "})
    assert response.status_code == 201
    body = response.json()
    assert isinstance(body["id"], int)
    assert body["name"] == "  Alice "
    assert "createdAt" in body and "updatedAt" in body


def test_create_user_rejects_bad_names(client):
    for payload in ({}, {"name": ""}, {"name": "   "}, {"name": 42}, {"name": None}):
        response = client.post("/users", json=payload)
        assert response.status_code == 400, payload
        assert response.content == b""


def test_create_user_rejects_malformed_json(client):
    response = client.post(
        "/users",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_get_user_round_trip(client, user):
    response = client.get(f"/users/{user['id']}")
    assert response.status_code == 200
    assert response.json() == user


def test_get_user_missing_and_bad_id(client):
    missing = client.get("/users/999")
    assert missing.status_code == 404
    assert missing.json() == {"message": "User not found"}

    assert client.get("/users/abc").status_code == 400


def test_patch_user_merges(client, user):
    unchanged = client.patch(f"/users/{user['id']}", json={})
    assert unchanged.status_code == 200
    assert unchanged.json()["name"] == "Alice"

    renamed = client.patch(f"/users/{user['id']}", json={"name": "Alicia"})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Alicia"
    assert renamed.json()["createdAt"] == user["createdAt"]


def test_patch_user_rejects_blank_name(client, user):
    assert client.patch(f"/users/{user['id']}", json={"name": "  "}).status_code == 400
    assert client.patch(f"/users/{user['id']}", json={"name": None}).status_code == 400
    assert client.get(f"/users/{user['id']}").json()["name"] == "Alice"


def test_patch_user_errors(client):
    assert client.patch("/users/abc", json={"name": "X"}).status_code == 400
    assert client.patch("/users/999", json={"name": "X"}).status_code == 404


def test_delete_user(client, user):
    assert client.delete("/users/abc").status_code == 400
    assert client.delete("/users/999").status_code == 404

    response = client.delete(f"/users/{user['id']}")
    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/users/{user['id']}").status_code == 404


def test_delete_user_leaves_expenses(client, user, make_expense):
    expense = make_expense()
    assert client.delete(f"/users/{user['id']}").status_code == 204

    response = client.get(f"/expenses/{expense['id']}")
    assert response.status_code == 200
    assert response.json()["userId"] == user["id"]


def test_list_users_in_id_order(client):
    ids = [client.post("/users", json={"name": n}).json()["id"] for n in ("A", "B", "C")]
    assert [u["id"] for u in client.get("/users").json()] == ids


def test_timestamps_are_stored_as_naive_utc(client, engine, user):
    renamed = client.patch(f"/users/{user['id']}", json={"name": "Alicia"})
    assert renamed.status_code == 200

    with Session(engine) as session:
        stored = session.get(User, user["id"])
        assert stored.created_at.tzinfo is None
        assert stored.updated_at.tzinfo is None
        assert stored.updated_at >= stored.created_at


def test_out_of_range_user_id_is_rejected(client):
    assert client.get("/users/99999999999999999999").status_code == 400
    assert client.patch("/users/-99999999999999999999", json={"name": "X"}).status_code == 400
    assert client.delete("/users/99999999999999999999").status_code == 400
