from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from portfolio.main import app

client = TestClient(app)

PROJECT = {
    "title": "Thunder Visualizer",
    "description": "Real time lightning effects for the portfolio landing page.",
    "tags": [" react ", "webgl"],
    "image": "https://cdn.example.com/thunder.png",
    "githubUrl": "https://github.com/example/thunder",
    "liveUrl": "",
    "featured": True,
}

EXPERIENCE = {
    "title": "Hardware Engineer",
    "company": "Acme",
    "description": "Designed FPGA based signal processing boards.",
    "date": "2021 - 2023",
    "location": "Remote",
}

EDUCATION = {
    "degree": "BSc",
    "field": "Electrical Engineering",
    "institution": "MIT",
    "date": "2016 - 2020",
    "location": "Cambridge",
}

SKILLS = {
    "title": "Languages",
    "icon": "Code",
    "skills": [{"name": "Python", "percentage": 90}],
    "order": 2,
}

INTEREST = {
    "title": "PCB Design",
    "icon": "Code",
    "description": "Designing multi layer boards for embedded systems.",
    "order": 1,
}


@pytest.fixture
def db(store):
    with patch("portfolio.routes.content.document_store", store):
        yield store


def test_list_empty(db):
    response = client.get("/api/projects")
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": []}


def test_create_project(db, admin_headers):
    response = client.post("/api/projects", json=PROJECT, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["tags"] == ["react", "webgl"]
    assert "_id" in data
    assert "createdAt" in data and "updatedAt" in data


def test_create_requires_token(db):
    response = client.post("/api/projects", json=PROJECT)
    assert response.status_code == 401
    assert db.find_all("projects") == []


def test_create_rejects_bad_url(db, admin_headers):
    response = client.post("/api/projects", json={**PROJECT, "image": "not a url"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "image"


def test_create_rejects_too_many_tags(db, admin_headers):
    response = client.post(
        "/api/projects", json={**PROJECT, "tags": [f"t{i}" for i in range(11)]}, headers=admin_headers
    )
    assert response.status_code == 400


def test_projects_newest_first(db):
    db.db["projects"].insert_many(
        [
            {**PROJECT, "title": "First project", "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc)},
            {**PROJECT, "title": "Second project", "createdAt": datetime(2024, 6, 1, tzinfo=timezone.utc)},
        ]
    )

    titles = [p["title"] for p in client.get("/api/projects").json()["data"]]

    assert titles == ["Second project", "First project"]


def test_projects_featured_and_limit(db, admin_headers):
    client.post("/api/projects", json={**PROJECT, "title": "Plain one", "featured": False}, headers=admin_headers)
    client.post("/api/projects", json={**PROJECT, "title": "Star one"}, headers=admin_headers)
    client.post("/api/projects", json={**PROJECT, "title": "Star two"}, headers=admin_headers)

    featured = client.get("/api/projects?featured=true").json()["data"]
    limited = client.get("/api/projects?limit=1").json()["data"]

    assert {p["title"] for p in featured} == {"Star one", "Star two"}
    assert len(limited) == 1


def test_skills_sorted_by_order(db, admin_headers):
    client.post("/api/skills", json=SKILLS, headers=admin_headers)
    client.post("/api/skills", json={**SKILLS, "title": "Hardware", "order": 1}, headers=admin_headers)

    data = client.get("/api/skills").json()["data"]

    assert [s["title"] for s in data] == ["Hardware", "Languages"]


def test_skill_percentage_range(db, admin_headers):
    body = {**SKILLS, "skills": [{"name": "Python", "percentage": 101}]}
    response = client.post("/api/skills", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "skills.0.percentage"


def test_update_experience(db, admin_headers):
    created = client.post("/api/experiences", json=EXPERIENCE, headers=admin_headers).json()["data"]

    response = client.put(
        "/api/experiences",
        json={**EXPERIENCE, "_id": created["_id"], "company": "Globex"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["company"] == "Globex"
    assert db.find_all("experiences")[0]["company"] == "Globex"


def test_update_requires_id(db, admin_headers):
    response = client.put("/api/education", json=EDUCATION, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Education ID is required"


def test_update_missing_document(db, admin_headers):
    response = client.put(
        "/api/education", json={**EDUCATION, "_id": "65f0c0ffee0123456789abcd"}, headers=admin_headers
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Education record not found"


def test_update_checks_id_before_fields(db, admin_headers):
    response = client.put("/api/education", json={"degree": "x"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Education ID is required"


def test_update_reports_invalid_fields(db, admin_headers):
    response = client.put(
        "/api/education",
        json={**EDUCATION, "_id": "65f0c0ffee0123456789abcd", "degree": "x"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid input"
    assert [d["field"] for d in body["details"]] == ["degree"]


@pytest.mark.parametrize("query", ["limit=0", "limit=abc", "limit=1", "featured=true"])
def test_non_project_lists_ignore_query_params(db, admin_headers, query):
    client.post("/api/skills", json=SKILLS, headers=admin_headers)
    client.post("/api/skills", json={**SKILLS, "title": "Hardware", "order": 1}, headers=admin_headers)

    response = client.get(f"/api/skills?{query}")

    assert response.status_code == 200
    assert len(response.json()["data"]) == 2


@pytest.mark.parametrize("query", ["limit=0", "limit=abc", "limit=-3"])
def test_projects_ignore_unusable_limit(db, admin_headers, query):
    client.post("/api/projects", json=PROJECT, headers=admin_headers)
    client.post("/api/projects", json={**PROJECT, "title": "Other project"}, headers=admin_headers)

    response = client.get(f"/api/projects?{query}")

    assert response.status_code == 200
    assert len(response.json()["data"]) == 2


def test_update_invalid_id(db, admin_headers):
    response = client.put("/api/interests", json={**INTEREST, "_id": "nope"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid ID format"


def test_delete_interest(db, admin_headers):
    created = client.post("/api/interests", json=INTEREST, headers=admin_headers).json()["data"]

    response = client.delete(f"/api/interests?id={created['_id']}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert db.find_all("interests") == []


def test_delete_requires_id(db, admin_headers):
    response = client.delete("/api/skills", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Skill category ID is required"


def test_delete_missing_document(db, admin_headers):
    response = client.delete("/api/projects?id=65f0c0ffee0123456789abcd", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "Project not found"


def test_delete_invalid_id(db, admin_headers):
    response = client.delete("/api/projects?id=123", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid ID format"


@patch("portfolio.routes.content.document_store")
def test_list_database_failure(mock_store):
    mock_store.find_all.side_effect = RuntimeError("down")

    response = client.get("/api/experiences")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to fetch experiences"}


@patch("portfolio.routes.content.document_store")
def test_create_database_failure(mock_store, admin_headers):
    mock_store.insert.side_effect = RuntimeError("down")

    response = client.post("/api/interests", json=INTEREST, headers=admin_headers)

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to create interest"
