"""
FastAPI Dependencies — Collaborators built once at startup and injected per request.
"""
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import InvalidArgument
from app.services.customer_service import CustomerService
from app.services.document_service import DocumentGenerator
from app.services.notification_service import NotificationService
from app.services.payment_gateway import RazorpayClient
from app.services.project_service import ProjectService
from app.services.renewal_service import RenewalService
from app.utils.validators import is_valid_id


def get_payment_gateway(request: Request) -> RazorpayClient:
    return request.app.state.payment_gateway


def get_document_generator(request: Request) -> DocumentGenerator:
    return request.app.state.document_generator


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


def get_current_user_id(user_id: str = Header(..., alias="user-id")) -> str:
    """Acting user, asserted by the authenticating gateway in front of this API."""
    if not is_valid_id(user_id):
        raise InvalidArgument("Invalid user ID")
    return user_id


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    return CustomerService(db)


def get_project_service(
    db: Session = Depends(get_db),
    documents: DocumentGenerator = Depends(get_document_generator),
) -> ProjectService:
    return ProjectService(db, documents)


def get_renewal_service(
    db: Session = Depends(get_db),
    gateway: RazorpayClient = Depends(get_payment_gateway),
    documents: DocumentGenerator = Depends(get_document_generator),
    notifier: NotificationService = Depends(get_notification_service),
) -> RenewalService:
    return RenewalService(db, gateway, documents, notifier)


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None
