import os
import uuid
from datetime import datetime, timedelta

from app.models import Project


def test_create_project_with_document(client, auth_headers, customer, documents):
    response = client.post(
        "/api/projects",
        json={
            "title": "Acme Storefront",
            "customer": customer.id,
            "domainName": "shop.acme.test",
            "domainStartDate": "2024-03-01T00:00:00",
            "domainEndDate": "2025-03-01T00:00:00",
            "fileFormat": "txt",
        },
        headers=auth_headers,
    )

    assert response.status_code == 201
    data = response.json()
    project = data["project"]
    assert project["status"] == "pending"
    assert project["renewalPrice"] == 50000
    assert project["customer"]["email"] == "ops@acme.test"
    assert data["fileError"] is None
    assert os.path.dirname(data["filePath"]) == documents.folder_for("Acme Storefront")
    assert project["filePath"] == data["filePath"]


def test_create_requires_title(client, auth_headers):
    response = client.post("/api/projects", json={"description": "untitled"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Title is required"


def test_create_rejects_unknown_customer(client, auth_headers):
    response = client.post(
        "/api/projects", json={"title": "Orphan", "customer": str(uuid.uuid4())}, headers=auth_headers
    )

    assert response.status_code == 404


def test_create_rejects_domain_end_before_start(client, auth_headers):
    response = client.post(
        "/api/projects",
        json={
            "title": "Backwards",
            "domainStartDate": "2024-03-01T00:00:00",
            "domainEndDate": "2024-01-01T00:00:00",
        },
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Domain end date must be after domain start date"


def test_create_rejects_bad_domain_name(client, auth_headers):
    response = client.post(
        "/api/projects", json={"title": "Bad Domain", "domainName": "https://acme"}, headers=auth_headers
    )

    assert response.status_code == 400


def test_create_rejects_unknown_status(client, auth_headers):
    response = client.post("/api/projects", json={"title": "Odd", "status": "archived"}, headers=auth_headers)

    assert response.status_code == 400


def test_get_project(client, auth_headers, make_project):
    project = make_project()

    response = client.get(f"/api/projects/{project.id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["title"] == "Acme Website"
    assert response.json()["createdBy"]["username"] == "amit"


def test_get_unknown_project(client, auth_headers):
    assert client.get(f"/api/projects/{uuid.uuid4()}", headers=auth_headers).status_code == 404


def test_update_project_fields(client, auth_headers, make_project, db):
    project = make_project(status="pending")

    response = client.patch(
        f"/api/projects/{project.id}", json={"status": "on-hold", "budget": 1200}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["project"]["status"] == "on-hold"
    db.expire_all()
    assert db.get(Project, project.id).budget == 1200


def test_title_change_moves_folder_and_drops_old_document(client, auth_headers, make_project, documents):
    folder = documents.create_project_folder("Old Title")
    old_file = os.path.join(folder, "summary.txt")
    with open(old_file, "w") as f:
        f.write("old")
    project = make_project(title="Old Title", file_path=old_file)

    response = client.patch(
        f"/api/projects/{project.id}", json={"title": "New Title", "fileFormat": "csv"}, headers=auth_headers
    )

    data = response.json()
    assert data["fileError"] is None
    assert not os.path.exists(folder)
    assert os.path.dirname(data["filePath"]) == documents.folder_for("New Title")
    assert data["filePath"].endswith(".csv")
    assert not os.path.exists(os.path.join(documents.folder_for("New Title"), "summary.txt"))


def test_expiring_lists_active_dated_projects_soonest_first(client, auth_headers, make_project):
    now = datetime(2025, 1, 1)
    later = make_project(title="Later", domain_end_date=now + timedelta(days=90))
    sooner = make_project(title="Sooner", domain_end_date=now + timedelta(days=5))
    make_project(title="Inactive", domain_end_date=now + timedelta(days=1), is_active=False)
    make_project(title="Undated", domain_end_date=None)

    response = client.get("/api/projects/expiring", headers=auth_headers)

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [sooner.id, later.id]
