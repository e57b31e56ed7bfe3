"""
Renewal Service — Paid domain renewals for projects.

Two steps, both driven by the dashboard:

1. ``initiate_payment``: price the renewal and open a Razorpay order.
   Nothing about the project changes.
2. ``confirm_renewal``: verify the checkout signature, then extend the
   domain expiry and append a RenewalRecord, exactly once per payment id.
   Document regeneration and the confirmation email follow the commit on a
   best-effort basis; their failures are reported, never raised.

A payment id is recorded at most once per project. The pre-check gives the
caller a clean ``Conflict``; the (project_id, payment_id) unique constraint
closes the race between two concurrent confirmations of the same payment.
Renewals with different payment ids are serialized by the project's
version counter: a stale write is retried from a fresh read.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random

from app.config import Settings, get_settings
from app.errors import (
    AuthenticationFailed, Conflict, InvalidArgument, NotFound, TransientError, UpstreamError,
)
from app.models import Project, RenewalRecord, User
from app.services.audit_service import AuditService
from app.services.document_service import DocumentGenerator
from app.services.notification_service import NotificationService
from app.services.payment_gateway import PaymentGatewayError, RazorpayClient
from app.services.project_service import get_project_or_raise, serialize_project
from app.utils.dates import add_years, epoch_millis, utcnow
from app.utils.validators import validate_duration, validate_file_format

logger = logging.getLogger(__name__)

COMMIT_ATTEMPTS = 3
DUPLICATE_PAYMENT_CONSTRAINT = "uq_renewal_project_payment"


# ─── Pricing & Receipts ──────────────────────────────────────────────

def renewal_unit_price(project: Project, default_price: int) -> int:
    """Per-year price in paise; an unset or zero price falls back to the default."""
    return project.renewal_price or default_price


def renewal_amount(project: Project, duration: int, default_price: int) -> int:
    return renewal_unit_price(project, default_price) * duration


def build_receipt(project_id: str, now: datetime) -> str:
    """Provider receipt, at most 40 chars: proj_<12 id chars>_<last 8 digits of epoch ms>."""
    short_project_id = project_id.replace("-", "")[:12]
    short_timestamp = str(epoch_millis(now))[-8:]
    return f"proj_{short_project_id}_{short_timestamp}"


def _is_duplicate_payment(exc: IntegrityError) -> bool:
    """True when `exc` is the (project_id, payment_id) unique violation."""
    diag = getattr(exc.orig, "diag", None)
    if diag is not None and getattr(diag, "constraint_name", None):
        return diag.constraint_name == DUPLICATE_PAYMENT_CONSTRAINT
    message = str(exc.orig)
    # SQLite names the columns rather than the constraint
    return DUPLICATE_PAYMENT_CONSTRAINT in message or (
        "UNIQUE" in message and "renewal_records.payment_id" in message
    )


class RenewalService:
    def __init__(
        self,
        db: Session,
        gateway: RazorpayClient,
        documents: DocumentGenerator,
        notifier: NotificationService,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.gateway = gateway
        self.documents = documents
        self.notifier = notifier
        self.settings = settings or get_settings()
        self.clock = clock

    # ─── Initiation ──────────────────────────────────────────────────

    def initiate_payment(
        self,
        project_id: str,
        duration: Any,
        user_id: str,
        client_ip: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Open a provider order for `duration` years of renewal."""
        project = get_project_or_raise(self.db, project_id)

        if not validate_duration(duration):
            raise InvalidArgument("Valid duration (in years) is required")

        amount = renewal_amount(project, duration, self.settings.DEFAULT_RENEWAL_PRICE)
        if amount < self.settings.MIN_ORDER_AMOUNT:
            raise InvalidArgument(f"Amount must be at least {self.settings.MIN_ORDER_AMOUNT} paise")

        currency = self.settings.RENEWAL_CURRENCY
        receipt = build_receipt(project.id, self.clock())
        notes = {"projectId": project.id, "userId": user_id, "duration": duration}
        logger.info("Creating renewal order for project %s: amount=%s receipt=%s", project.id, amount, receipt)

        try:
            order = self.gateway.create_order(amount, currency, receipt, notes)
        except PaymentGatewayError as exc:
            raise UpstreamError(f"Failed to create payment order: {exc.description or exc}") from exc

        logger.info(
            "Renewal order %s opened for project %s (amount=%s duration=%s user=%s ip=%s)",
            order["id"], project.id, amount, duration, user_id, client_ip,
        )

        return {
            "order_id": order["id"],
            "amount": amount,
            "currency": currency,
            "key_id": self.gateway.key_id,
        }

    # ─── Confirmation ────────────────────────────────────────────────

    def confirm_renewal(
        self,
        project_id: str,
        payment_id: Optional[str],
        order_id: Optional[str],
        signature: Optional[str],
        duration: Any,
        user_id: str,
        document_format: Optional[str] = None,
        client_ip: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Validate a checkout callback and commit the renewal.

        Returns ``{"project", "file_path", "file_error"}``; ``file_error`` is
        None only when every post-commit step succeeded.
        """
        get_project_or_raise(self.db, project_id)

        if not all(isinstance(field, str) and field for field in (payment_id, order_id, signature)):
            raise InvalidArgument("Payment details are required")
        if not validate_duration(duration):
            raise InvalidArgument("Valid duration (in years) is required")
        if document_format and not validate_file_format(document_format, self.settings.ALLOWED_FILE_FORMATS):
            raise InvalidArgument(
                f"Invalid file format. Allowed: {', '.join(self.settings.ALLOWED_FILE_FORMATS)}"
            )

        if not self.gateway.verify_payment_signature(order_id, payment_id, signature):
            logger.warning(
                "Invalid payment signature for project %s (order=%s payment=%s ip=%s): possible tampering",
                project_id, order_id, payment_id, client_ip,
            )
            raise AuthenticationFailed("Invalid payment signature")

        self._ensure_not_processed(project_id, payment_id)
        if not self.db.get(User, user_id):
            raise NotFound("User not found")

        try:
            project, new_end_date, amount = self._commit_renewal(project_id, payment_id, duration, user_id)
        except StaleDataError as exc:
            logger.error("Renewal of project %s lost %d optimistic-lock races", project_id, COMMIT_ATTEMPTS)
            raise TransientError("Project is being renewed concurrently, please retry") from exc

        logger.info(
            "Project %s renewed until %s (payment=%s amount=%s by=%s)",
            project_id, new_end_date.isoformat(), payment_id, amount, user_id,
        )
        self._audit(
            project_id, "RENEWAL_CONFIRMED",
            payload={
                "paymentId": payment_id,
                "orderId": order_id,
                "amount": amount,
                "duration": duration,
                "newEndDate": new_end_date.isoformat(),
            },
            client_ip=client_ip,
            metadata={"userId": user_id},
        )

        errors = []
        file_path = project.file_path
        if document_format:
            try:
                file_path = self._regenerate_document(project, document_format)
            except Exception as exc:
                self.db.rollback()
                logger.exception("File generation error for project %s", project_id)
                errors.append(f"Failed to generate project file: {exc}")
                file_path = project.file_path

        try:
            self._send_confirmation(user_id, project, amount, payment_id, new_end_date)
        except Exception as exc:
            logger.error("Failed to send renewal email for project %s: %s", project_id, exc)
            errors.append(f"Email failed: {exc}")

        return {
            "project": serialize_project(project),
            "file_path": file_path,
            "file_error": "; ".join(errors) or None,
        }

    def _ensure_not_processed(self, project_id: str, payment_id: str) -> None:
        already = (
            self.db.query(RenewalRecord.id)
            .filter(RenewalRecord.project_id == project_id, RenewalRecord.payment_id == payment_id)
            .first()
        )
        if already:
            logger.info("Payment %s already applied to project %s", payment_id, project_id)
            raise Conflict("Payment already processed")

    @retry(
        retry=retry_if_exception_type(StaleDataError),
        stop=stop_after_attempt(COMMIT_ATTEMPTS),
        wait=wait_random(min=0.01, max=0.1),
        reraise=True,
    )
    def _commit_renewal(
        self, project_id: str, payment_id: str, duration: int, user_id: str
    ) -> Tuple[Project, datetime, int]:
        # Fresh read on every attempt so a retry sees the winning writer's state
        self.db.expire_all()
        project = self.db.get(Project, project_id)
        if not project:
            raise NotFound("Project not found")
        self._ensure_not_processed(project_id, payment_id)

        now = self.clock()
        new_end_date = add_years(project.domain_end_date or now, duration)
        if project.domain_start_date and new_end_date < project.domain_start_date:
            raise InvalidArgument("New end date must be after domain start date")
        amount = renewal_amount(project, duration, self.settings.DEFAULT_RENEWAL_PRICE)

        project.domain_end_date = new_end_date
        project.is_active = True
        if project.status == "completed":
            project.status = "in-progress"
        project.renewal_history.append(
            RenewalRecord(
                renewed_at=now,
                new_end_date=new_end_date,
                renewed_by=user_id,
                payment_id=payment_id,
                amount=amount,
            )
        )

        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            logger.info("Concurrent update on project %s, retrying renewal commit", project_id)
            raise
        except IntegrityError as exc:
            self.db.rollback()
            if _is_duplicate_payment(exc):
                raise Conflict("Payment already processed") from exc
            logger.error("Integrity failure persisting renewal for project %s: %s", project_id, exc.orig)
            raise TransientError("Failed to save renewal, please retry") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to persist renewal for project %s: %s", project_id, exc)
            raise TransientError("Failed to save renewal, please retry") from exc

        return project, new_end_date, amount

    # ─── Post-commit side effects ────────────────────────────────────

    def _regenerate_document(self, project: Project, document_format: str) -> str:
        folder = self.documents.create_project_folder(project.title)
        if project.file_path:
            self.documents.delete_existing(project.file_path)
            project.file_path = None
            self.db.commit()
        path = self.documents.generate(serialize_project(project), document_format, folder)
        project.file_path = path
        self.db.commit()
        return path

    def _send_confirmation(
        self, user_id: str, project: Project, amount: int, payment_id: str, new_end_date: datetime
    ) -> None:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFound("User not found")
        text, html = self.notifier.build_renewal_email(
            fullname=user.fullname,
            project_title=project.title,
            amount_paise=amount,
            payment_id=payment_id,
            new_end_date=new_end_date,
        )
        self.notifier.send_email(user.email, "Project Renewal Confirmation", text, html)

    def _audit(
        self,
        project_id: str,
        action: str,
        payload: Dict[str, Any],
        client_ip: Optional[str],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        try:
            AuditService.log(self.db, project_id, action, payload=payload, ip_address=client_ip, metadata=metadata)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to write %s audit entry for project %s: %s", action, project_id, exc)
