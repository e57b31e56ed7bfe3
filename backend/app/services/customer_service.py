"""
Customer Service — Customer records and the customer delete policy.

Delete policy:
    soft — mark the customer inactive; projects are untouched.
    hard — delete every project owned by the customer (with their renewal
           history), then the customer, in one transaction.
"""
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import Conflict, InvalidArgument, NotFound, TransientError
from app.models import Customer, Project
from app.schemas.schemas import CustomerCreateRequest, CustomerUpdateRequest
from app.utils.validators import is_valid_id

logger = logging.getLogger(__name__)

DELETE_ACTIONS = ("soft", "hard")


class CustomerService:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_raise(self, customer_id: str) -> Customer:
        if not is_valid_id(customer_id):
            raise InvalidArgument("Invalid customer ID")
        customer = self.db.get(Customer, customer_id)
        if not customer:
            raise NotFound("Customer not found")
        return customer

    def _email_taken(self, email: str) -> bool:
        return self.db.query(Customer.id).filter(Customer.email == email).first() is not None

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to %s customer: %s", action, exc)
            raise TransientError(f"Failed to {action} customer") from exc

    def create(self, payload: CustomerCreateRequest) -> Customer:
        if not payload.name or not payload.email:
            raise InvalidArgument("Name and email are required")

        email = payload.email.strip().lower()
        if self._email_taken(email):
            raise Conflict("Customer with this email already exists", status_code=409)

        customer = Customer(
            id=str(uuid.uuid4()),
            name=payload.name.strip(),
            email=email,
            phone=payload.phone,
            address=payload.address,
            company=payload.company,
            notes=payload.notes,
            is_active=True,
        )
        self.db.add(customer)
        self._commit("create")
        logger.info("Customer %s created", customer.id)
        return customer

    def get(self, customer_id: str) -> Customer:
        return self._get_or_raise(customer_id)

    def update(self, customer_id: str, payload: CustomerUpdateRequest) -> Customer:
        customer = self._get_or_raise(customer_id)

        if payload.email:
            email = payload.email.strip().lower()
            if email != customer.email and self._email_taken(email):
                raise Conflict("Customer with this email already exists", status_code=409)
            customer.email = email

        for field in ("name", "phone", "address", "company", "notes"):
            value = getattr(payload, field)
            if value:
                setattr(customer, field, value)
        customer.is_active = True

        self._commit("update")
        return customer

    def delete(self, customer_id: str, action: str = "soft") -> str:
        """Apply the delete policy. Returns a human-readable outcome."""
        if action not in DELETE_ACTIONS:
            raise InvalidArgument("Invalid action. Use 'hard' or 'soft'")
        customer = self._get_or_raise(customer_id)

        if action == "soft":
            customer.is_active = False
            self._commit("deactivate")
            logger.info("Customer %s deactivated", customer_id)
            return "Customer deactivated successfully"

        projects = self.db.query(Project).filter(Project.customer_id == customer_id).all()
        for project in projects:
            self.db.delete(project)
        self.db.delete(customer)
        self._commit("delete")
        logger.info("Customer %s hard-deleted with %d project(s)", customer_id, len(projects))
        return "Customer and associated projects deleted successfully"
