import uuid

import pytest

from app.models import Customer, Project, RenewalRecord


def create(client, headers, **body):
    return client.post("/api/customers", json=body, headers=headers)


def test_create_customer_normalizes_email(client, auth_headers):
    response = create(client, auth_headers, name="Globex", email="Admin@Globex.TEST", company="Globex")

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "admin@globex.test"
    assert body["isActive"] is True


@pytest.mark.parametrize("body", [{"name": "No Email"}, {"email": "x@y.test"}, {}])
def test_name_and_email_are_required(client, auth_headers, body):
    response = create(client, auth_headers, **body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Name and email are required"


def test_duplicate_email_conflicts(client, auth_headers, customer):
    response = create(client, auth_headers, name="Acme Again", email="OPS@acme.test")

    assert response.status_code == 409
    assert response.json()["error_code"] == "CONFLICT"


def test_get_customer(client, auth_headers, customer):
    response = client.get(f"/api/customers/{customer.id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Acme Corp"


def test_get_unknown_customer(client, auth_headers):
    assert client.get(f"/api/customers/{uuid.uuid4()}", headers=auth_headers).status_code == 404
    assert client.get("/api/customers/bogus", headers=auth_headers).status_code == 400


def test_update_customer_rejects_taken_email(client, auth_headers, customer):
    other = create(client, auth_headers, name="Globex", email="admin@globex.test").json()

    response = client.patch(
        f"/api/customers/{other['id']}", json={"email": "ops@acme.test"}, headers=auth_headers
    )

    assert response.status_code == 409


def test_update_customer_reactivates(client, auth_headers, customer, db):
    customer.is_active = False
    db.commit()

    response = client.patch(f"/api/customers/{customer.id}", json={"phone": "+91 99999 00000"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["phone"] == "+91 99999 00000"
    assert response.json()["isActive"] is True


def test_soft_delete_deactivates_only(client, auth_headers, customer, make_project, db):
    project = make_project(customer_id=customer.id)

    response = client.delete(f"/api/customers/{customer.id}", headers=auth_headers)

    assert response.json()["message"] == "Customer deactivated successfully"
    db.expire_all()
    assert db.get(Customer, customer.id).is_active is False
    assert db.get(Project, project.id) is not None


def test_hard_delete_cascades_to_projects_and_history(client, auth_headers, customer, make_project, db, user):
    owned = make_project(customer_id=customer.id)
    owned.renewal_history.append(RenewalRecord(
        new_end_date=owned.domain_end_date, renewed_by=user.id, payment_id="pay_H1", amount=50000,
    ))
    db.commit()
    personal = make_project(title="Personal Blog")
    owned_id, personal_id, customer_id = owned.id, personal.id, customer.id

    response = client.delete(f"/api/customers/{customer_id}?action=hard", headers=auth_headers)

    assert response.status_code == 200
    db.expire_all()
    assert db.query(Customer).filter(Customer.id == customer_id).count() == 0
    assert db.query(Project).filter(Project.id == owned_id).count() == 0
    assert db.query(RenewalRecord).filter(RenewalRecord.project_id == owned_id).count() == 0
    assert db.get(Project, personal_id) is not None


def test_unknown_delete_action(client, auth_headers, customer):
    response = client.delete(f"/api/customers/{customer.id}?action=purge", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid action. Use 'hard' or 'soft'"
