"""
Shared fixtures: in-memory database, Razorpay client on a mock transport,
document folder under tmp_path, and a TestClient with dependency overrides.
"""
import hashlib
import hmac
import json
import os
import tempfile
import uuid
from datetime import datetime

# Settings are cached on first import; configure the environment before any app import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="dashboard-logs-"))

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_db, init_db
from app.dependencies import get_document_generator, get_notification_service, get_payment_gateway
from app.main import app
from app.models import Customer, Project, User
from app.services.document_service import DocumentGenerator
from app.services.notification_service import NotificationService
from app.services.payment_gateway import RazorpayClient
from app.services.renewal_service import RenewalService
from app.utils.rate_limiter import reset_rate_limits

KEY_ID = "rzp_test_key"
KEY_SECRET = "rzp_test_secret"


def sign(order_id: str, payment_id: str, secret: str = KEY_SECRET) -> str:
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


class OrderRecorder:
    """httpx transport handler standing in for the Razorpay Orders API."""

    def __init__(self):
        self.requests = []
        self.fail_with = None  # (status, body) to simulate provider errors

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with:
            status, body = self.fail_with
            return httpx.Response(status, json=body)
        payload = json.loads(request.content)
        return httpx.Response(200, json={
            "id": f"order_{len(self.requests):06d}",
            "entity": "order",
            "amount": payload["amount"],
            "currency": payload["currency"],
            "receipt": payload["receipt"],
            "status": "created",
        })

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def orders():
    return OrderRecorder()


@pytest.fixture
def gateway(orders):
    client = RazorpayClient(KEY_ID, KEY_SECRET, transport=httpx.MockTransport(orders))
    yield client
    client.close()


@pytest.fixture
def documents(tmp_path):
    return DocumentGenerator(str(tmp_path / "projects"), ["pdf", "csv", "txt"])


@pytest.fixture
def notifier():
    return NotificationService()  # No SMTP host: messages are logged


@pytest.fixture
def renewal_service(db, gateway, documents, notifier):
    return RenewalService(db, gateway, documents, notifier)


@pytest.fixture
def client(session_factory, gateway, documents, notifier):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_document_generator] = lambda: documents
    app.dependency_overrides[get_notification_service] = lambda: notifier
    reset_rate_limits()

    yield TestClient(app)

    app.dependency_overrides.clear()
    reset_rate_limits()


# ─── Record factories ───────────────────────────────────────────────

@pytest.fixture
def user(db):
    record = User(
        id=str(uuid.uuid4()),
        username="amit",
        fullname="Amit Mishra",
        email="amit@example.com",
    )
    db.add(record)
    db.commit()
    return record


@pytest.fixture
def auth_headers(user):
    return {"user-id": user.id}


@pytest.fixture
def customer(db):
    record = Customer(id=str(uuid.uuid4()), name="Acme Corp", email="ops@acme.test", is_active=True)
    db.add(record)
    db.commit()
    return record


@pytest.fixture
def make_project(db, user):
    def _make(**overrides):
        fields = {
            "id": str(uuid.uuid4()),
            "title": "Acme Website",
            "created_by": user.id,
            "status": "completed",
            "domain_name": "acme.test",
            "domain_start_date": datetime(2024, 1, 1),
            "domain_end_date": datetime(2025, 1, 1),
            "renewal_price": 50000,
            "is_active": True,
        }
        fields.update(overrides)
        project = Project(**fields)
        db.add(project)
        db.commit()
        return project

    return _make
