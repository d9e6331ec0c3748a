from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from portfolio.main import app
from portfolio.services.passwords import hash_password, verify_password

client = TestClient(app)


@pytest.fixture
def admin_store(store):
    store.upsert_admin("admin", "admin@example.com", hash_password("correct-horse"))
    with patch("portfolio.routes.auth.document_store", store):
        yield store


def test_password_hash_roundtrip():
    hashed = hash_password("correct-horse")
    assert hashed != "correct-horse"
    assert verify_password("correct-horse", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_verify_password_with_corrupt_hash():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_login_success(admin_store):
    response = client.post("/api/auth/login", json={"username": "admin", "password": "correct-horse"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["user"] == {"username": "admin", "email": "admin@example.com"}

    claim = app.state.token_service.verify(data["token"])
    assert claim.username == "admin"
    assert claim.user_id == str(admin_store.find_admin("admin")["_id"])


def test_login_token_opens_admin_routes(admin_store):
    token = client.post(
        "/api/auth/login", json={"username": "admin", "password": "correct-horse"}
    ).json()["token"]

    response = client.delete("/api/projects", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 400
    assert response.json()["error"] == "Project ID is required"


def test_login_wrong_password(admin_store):
    response = client.post("/api/auth/login", json={"username": "admin", "password": "wrong-horse"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid credentials"}


def test_login_unknown_user(admin_store):
    response = client.post("/api/auth/login", json={"username": "ghost", "password": "correct-horse"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_login_rejects_invalid_username(admin_store):
    response = client.post("/api/auth/login", json={"username": "ad min!", "password": "correct-horse"})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "username"


def test_login_rejects_short_password(admin_store):
    response = client.post("/api/auth/login", json={"username": "admin", "password": "123"})
    assert response.status_code == 400


@patch("portfolio.routes.auth.document_store")
def test_login_database_failure(mock_store):
    mock_store.find_admin.side_effect = RuntimeError("connection refused")

    response = client.post("/api/auth/login", json={"username": "admin", "password": "correct-horse"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Login failed"}
