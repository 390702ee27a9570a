"""
API tests for /api/users: auth, pagination, status codes and error bodies.
Uses FastAPI TestClient with get_db overridden; tokens are minted with the shared secret.
"""
import uuid

import pytest

from nuclear.services import blocks as block_service


@pytest.fixture
def student(make_user):
    return make_user(name="Student")


@pytest.fixture
def admin(make_user):
    return make_user(mode="ADMIN", name="Admin")


def test_requires_bearer_token(client):
    r = client.get("/api/users")
    assert r.status_code == 401
    assert "error" in r.json()
    r = client.get("/api/users", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_token_for_deleted_user_is_rejected(client, db, student, auth_headers):
    headers = auth_headers(student)
    db.delete(student)
    db.commit()
    assert client.get("/api/users", headers=headers).status_code == 401


def test_create_user(client, student, auth_headers):
    email = f"new-{uuid.uuid4().hex[:6]}@Example.com"
    r = client.post("/api/users", json={"email": email, "name": "New"}, headers=auth_headers(student))
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["email"] == email.lower()
    assert data["mode"] == "STUDENT"
    assert data["id"]


def test_create_user_duplicate_email_409(client, student, auth_headers):
    r = client.post("/api/users", json={"email": student.email}, headers=auth_headers(student))
    assert r.status_code == 409
    assert "already exists" in r.json()["error"]


@pytest.mark.parametrize(
    "body, field",
    [({"email": "nope"}, "email"), ({"email": "a@example.com", "mode": "GOD"}, "mode"), ({}, "email")],
)
def test_create_user_validation_400(client, student, auth_headers, body, field):
    r = client.post("/api/users", json=body, headers=auth_headers(student))
    assert r.status_code == 400
    data = r.json()
    assert data["error"] == "Validation failed"
    assert field in [d["field"] for d in data["details"]]


def test_list_users_pagination(client, make_user, student, auth_headers):
    for _ in range(4):
        make_user()
    r = client.get("/api/users", params={"page": 2, "limit": 2}, headers=auth_headers(student))
    assert r.status_code == 200
    data = r.json()
    assert len(data["users"]) == 2
    assert data["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}


def test_list_users_limit_is_clamped(client, student, auth_headers):
    r = client.get("/api/users", params={"limit": 10_000}, headers=auth_headers(student))
    assert r.status_code == 200
    assert r.json()["pagination"]["limit"] == 100
    r = client.get("/api/users", params={"page": 0}, headers=auth_headers(student))
    assert r.status_code == 400


def test_list_users_search(client, make_user, student, auth_headers):
    make_user(name="Lise Meitner")
    r = client.get("/api/users", params={"search": "meitner"}, headers=auth_headers(student))
    assert [u["name"] for u in r.json()["users"]] == ["Lise Meitner"]


def test_get_user_404(client, student, auth_headers):
    r = client.get(f"/api/users/{uuid.uuid4()}", headers=auth_headers(student))
    assert r.status_code == 404
    assert "not found" in r.json()["error"]


def test_update_self_but_not_others(client, student, make_user, auth_headers):
    headers = auth_headers(student)
    r = client.put(f"/api/users/{student.id}", json={"name": "Renamed"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Renamed"
    other = make_user()
    assert client.put(f"/api/users/{other.id}", json={"name": "x"}, headers=headers).status_code == 403
    assert client.put(f"/api/users/{student.id}", json={"mode": "ADMIN"}, headers=headers).status_code == 403


def test_only_admin_creates_privileged_users(client, student, admin, auth_headers):
    r = client.post("/api/users", json={"email": "esc@example.com", "mode": "ADMIN"}, headers=auth_headers(student))
    assert r.status_code == 403
    assert "error" in r.json()
    r = client.post("/api/users", json={"email": "esc@example.com", "mode": "STUDENT"}, headers=auth_headers(student))
    assert r.status_code == 201
    r = client.post("/api/users", json={"email": "staff@example.com", "mode": "TEACHER"}, headers=auth_headers(admin))
    assert r.status_code == 201
    assert r.json()["mode"] == "TEACHER"


def test_admin_can_change_mode(client, student, admin, auth_headers):
    r = client.put(f"/api/users/{student.id}", json={"mode": "TEACHER"}, headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["mode"] == "TEACHER"


def test_delete_requires_admin(client, db, student, admin, make_user, auth_headers):
    target = make_user()
    assert client.delete(f"/api/users/{target.id}", headers=auth_headers(student)).status_code == 403
    r = client.delete(f"/api/users/{target.id}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json() == {"message": "User deleted successfully"}
    assert client.get(f"/api/users/{target.id}", headers=auth_headers(admin)).status_code == 404


def test_delete_author_is_conflict(client, db, admin, make_user, auth_headers):
    author = make_user(mode="TEACHER")
    block_service.create_block(db, {"title": "T", "content": "C", "author_id": author.id})
    r = client.delete(f"/api/users/{author.id}", headers=auth_headers(admin))
    assert r.status_code == 409


def test_user_points_total(client, student, auth_headers):
    headers = auth_headers(student)
    for points in (2, 3):
        client.post("/api/points-updates", json={"points": points, "user_id": student.id}, headers=headers)
    r = client.get(f"/api/users/{student.id}/points/total", headers=headers)
    assert r.json() == {"user_id": student.id, "total": 5}
