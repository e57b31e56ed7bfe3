import uuid
from datetime import datetime

import pytest

from app.models import AuditLog
from app.services.renewal_service import build_receipt
from conftest import KEY_ID


@pytest.mark.parametrize("price,duration", [(50000, 1), (50000, 3), (120000, 2), (250, 4)])
def test_order_amount_is_price_times_duration(client, auth_headers, make_project, orders, price, duration):
    project = make_project(renewal_price=price)

    response = client.post(
        f"/api/projects/{project.id}/renew/initiate", json={"duration": duration}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["amount"] == price * duration
    assert body["currency"] == "INR"
    assert body["keyId"] == KEY_ID
    assert body["orderId"] == "order_000001"
    assert orders.last_payload["amount"] == price * duration


def test_order_request_carries_receipt_and_notes(client, auth_headers, make_project, orders, user):
    project = make_project()

    client.post(f"/api/projects/{project.id}/renew/initiate", json={"duration": 2}, headers=auth_headers)

    payload = orders.last_payload
    assert payload["currency"] == "INR"
    assert payload["receipt"].startswith(f"proj_{project.id.replace('-', '')[:12]}_")
    assert len(payload["receipt"]) <= 40
    assert payload["notes"] == {"projectId": project.id, "userId": user.id, "duration": 2}
    assert orders.requests[-1].headers["authorization"].startswith("Basic ")


def test_zero_price_falls_back_to_default(client, auth_headers, make_project):
    project = make_project(renewal_price=0)

    response = client.post(
        f"/api/projects/{project.id}/renew/initiate", json={"duration": 2}, headers=auth_headers
    )

    assert response.json()["amount"] == 100000


def test_nothing_is_persisted_on_initiation(client, auth_headers, make_project, db):
    project = make_project()

    client.post(f"/api/projects/{project.id}/renew/initiate", json={"duration": 1}, headers=auth_headers)

    db.expire_all()
    assert project.domain_end_date == datetime(2025, 1, 1)
    assert project.renewal_history == []
    assert project.status == "completed"
    assert db.query(AuditLog).filter(AuditLog.project_id == project.id).count() == 0


def test_malformed_project_id_is_rejected(client, auth_headers, orders):
    response = client.post("/api/projects/not-an-id/renew/initiate", json={"duration": 1}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid project ID"
    assert orders.requests == []


def test_unknown_project_is_not_found(client, auth_headers):
    response = client.post(
        f"/api/projects/{uuid.uuid4()}/renew/initiate", json={"duration": 1}, headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


@pytest.mark.parametrize("body", [{}, {"duration": 0}, {"duration": -2}, {"duration": None}])
def test_invalid_duration_is_rejected(client, auth_headers, make_project, orders, body):
    project = make_project()

    response = client.post(f"/api/projects/{project.id}/renew/initiate", json=body, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Valid duration (in years) is required"
    assert orders.requests == []


@pytest.mark.parametrize("duration", ["1", 1.5, True])
def test_non_integer_duration_is_rejected(client, auth_headers, make_project, orders, duration):
    project = make_project()

    response = client.post(
        f"/api/projects/{project.id}/renew/initiate", json={"duration": duration}, headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Valid duration (in years) is required"
    assert orders.requests == []


@pytest.mark.parametrize("duration", ["1", 1.5])
def test_unknown_project_wins_over_mistyped_duration(client, auth_headers, orders, duration):
    response = client.post(
        f"/api/projects/{uuid.uuid4()}/renew/initiate", json={"duration": duration}, headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found"
    assert orders.requests == []


def test_amount_below_provider_minimum_is_rejected(client, auth_headers, make_project, orders):
    project = make_project(renewal_price=40)

    response = client.post(
        f"/api/projects/{project.id}/renew/initiate", json={"duration": 2}, headers=auth_headers
    )

    assert response.status_code == 400
    assert "at least 100 paise" in response.json()["detail"]
    assert orders.requests == []


def test_provider_failure_surfaces_description(client, auth_headers, make_project, orders):
    project = make_project()
    orders.fail_with = (400, {"error": {"code": "BAD_REQUEST_ERROR", "description": "The api key provided is invalid"}})

    response = client.post(
        f"/api/projects/{project.id}/renew/initiate", json={"duration": 1}, headers=auth_headers
    )

    assert response.status_code == 500
    assert response.json() == {
        "detail": "Failed to create payment order: The api key provided is invalid",
        "error_code": "UPSTREAM_ERROR",
    }


def test_missing_user_header_is_rejected(client, make_project):
    project = make_project()

    response = client.post(f"/api/projects/{project.id}/renew/initiate", json={"duration": 1})

    assert response.status_code == 400


def test_initiation_is_rate_limited(client, auth_headers, make_project):
    project = make_project()
    url = f"/api/projects/{project.id}/renew/initiate"

    statuses = [client.post(url, json={"duration": 1}, headers=auth_headers).status_code for _ in range(6)]

    assert statuses == [200] * 5 + [429]


def test_receipt_is_bounded_and_traceable():
    project_id = "686176cc-e7e6-4b1a-9c3d-0123456789ab"
    now = datetime(2025, 6, 29, 17, 29, 38, 123000)

    receipt = build_receipt(project_id, now)

    assert receipt == build_receipt(project_id, now)
    assert receipt.startswith("proj_686176cce7e6_")
    assert len(receipt.split("_")[-1]) == 8
    assert len(receipt) <= 40
