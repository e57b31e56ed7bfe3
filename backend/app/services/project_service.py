"""
Project Service — Project records, their documents, and the expiring-domains view.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.config import Settings, get_settings
from app.errors import InvalidArgument, NotFound, TransientError
from app.models import Customer, Project, User
from app.schemas.schemas import ProjectCreateRequest, ProjectUpdateRequest
from app.services.document_service import DocumentGenerator
from app.utils.dates import to_naive_utc, utcnow
from app.utils.validators import is_valid_id, validate_domain_name, validate_file_format

logger = logging.getLogger(__name__)


def serialize_project(project: Project) -> Dict[str, Any]:
    """Populated, camelCase view of a project (API responses and document snapshots)."""
    customer = project.customer
    creator = project.creator
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "customer": (
            {"id": customer.id, "name": customer.name, "email": customer.email} if customer else None
        ),
        "createdBy": (
            {"id": creator.id, "username": creator.username, "fullname": creator.fullname} if creator else None
        ),
        "status": project.status,
        "startDate": project.start_date,
        "endDate": project.end_date,
        "budget": project.budget,
        "domainName": project.domain_name,
        "domainStartDate": project.domain_start_date,
        "domainEndDate": project.domain_end_date,
        "isActive": project.is_active,
        "filePath": project.file_path,
        "renewalPrice": project.renewal_price,
        "renewalHistory": [
            {
                "renewedAt": entry.renewed_at,
                "newEndDate": entry.new_end_date,
                "renewedBy": entry.renewed_by,
                "paymentId": entry.payment_id,
                "amount": entry.amount,
            }
            for entry in project.renewal_history
        ],
        "createdAt": project.created_at,
        "updatedAt": project.updated_at,
    }


def get_project_or_raise(db: Session, project_id: str) -> Project:
    if not is_valid_id(project_id):
        raise InvalidArgument("Invalid project ID")
    project = db.get(Project, project_id)
    if not project:
        raise NotFound("Project not found")
    return project


class ProjectService:
    def __init__(self, db: Session, documents: DocumentGenerator, settings: Optional[Settings] = None):
        self.db = db
        self.documents = documents
        self.settings = settings or get_settings()

    # ─── Validation ──────────────────────────────────────────────────

    def _check_file_format(self, file_format: Optional[str]) -> None:
        if file_format and not validate_file_format(file_format, self.settings.ALLOWED_FILE_FORMATS):
            raise InvalidArgument(
                f"Invalid file format. Allowed: {', '.join(self.settings.ALLOWED_FILE_FORMATS)}"
            )

    def _check_customer(self, customer_id: Optional[str]) -> None:
        if not customer_id:
            return
        if not is_valid_id(customer_id):
            raise InvalidArgument("Invalid customer ID")
        if not self.db.get(Customer, customer_id):
            raise NotFound("Customer not found")

    @staticmethod
    def _check_invariants(project: Project) -> None:
        if project.title is None or not 3 <= len(project.title.strip()) <= 100:
            raise InvalidArgument("Project title must be between 3 and 100 characters")
        if project.domain_name and not validate_domain_name(project.domain_name):
            raise InvalidArgument("Please enter a valid domain name (e.g., example.com)")
        if project.start_date and project.end_date and project.end_date < project.start_date:
            raise InvalidArgument("End date must be after start date")
        if project.domain_start_date and project.domain_start_date > utcnow():
            raise InvalidArgument("Domain start date cannot be in the future")
        if (
            project.domain_start_date
            and project.domain_end_date
            and project.domain_end_date < project.domain_start_date
        ):
            raise InvalidArgument("Domain end date must be after domain start date")

    # ─── Documents ───────────────────────────────────────────────────

    def write_document(self, project: Project, file_format: str, folder: str) -> str:
        """Generate a document from the populated project and record its path."""
        path = self.documents.generate(serialize_project(project), file_format, folder)
        project.file_path = path
        self.db.commit()
        return path

    # ─── Operations ──────────────────────────────────────────────────

    def create(self, payload: ProjectCreateRequest, user_id: str) -> Dict[str, Any]:
        if not payload.title:
            raise InvalidArgument("Title is required")
        self._check_customer(payload.customer)
        self._check_file_format(payload.file_format)
        if not self.db.get(User, user_id):
            raise NotFound("User not found")

        project = Project(
            id=str(uuid.uuid4()),
            title=payload.title.strip(),
            description=payload.description,
            customer_id=payload.customer or None,
            created_by=user_id,
            domain_name=payload.domain_name,
            domain_start_date=to_naive_utc(payload.domain_start_date),
            domain_end_date=to_naive_utc(payload.domain_end_date),
            start_date=to_naive_utc(payload.start_date) or utcnow(),
            end_date=to_naive_utc(payload.end_date),
            status=payload.status or "pending",
            budget=payload.budget,
            renewal_price=(
                payload.renewal_price if payload.renewal_price is not None
                else self.settings.DEFAULT_RENEWAL_PRICE
            ),
            is_active=True,
        )
        self._check_invariants(project)
        self.db.add(project)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to create project: %s", exc)
            raise TransientError("Failed to save project") from exc
        logger.info("Project %s created by %s", project.id, user_id)

        file_path = None
        file_error = None
        if payload.file_format:
            try:
                folder = self.documents.create_project_folder(project.title)
                file_path = self.write_document(project, payload.file_format, folder)
            except Exception as exc:
                self.db.rollback()
                logger.exception("File generation error for project %s", project.id)
                file_error = f"Failed to generate project file: {exc}"

        return {"project": serialize_project(project), "file_path": file_path, "file_error": file_error}

    def get(self, project_id: str) -> Dict[str, Any]:
        return serialize_project(get_project_or_raise(self.db, project_id))

    def update(self, project_id: str, payload: ProjectUpdateRequest) -> Dict[str, Any]:
        changes = payload.model_dump(exclude_unset=True)
        file_format = changes.pop("file_format", None)
        if "customer" in changes:
            self._check_customer(changes.get("customer"))
        self._check_file_format(file_format)

        project = get_project_or_raise(self.db, project_id)
        old_title = project.title

        if "customer" in changes:
            project.customer_id = changes.pop("customer") or None
        for field in ("domain_start_date", "domain_end_date", "start_date", "end_date"):
            if field in changes:
                changes[field] = to_naive_utc(changes[field])
        for field, value in changes.items():
            # Explicit nulls never erase required fields
            if value is None and field in ("title", "status", "is_active", "renewal_price"):
                continue
            setattr(project, field, value.strip() if field == "title" else value)

        try:
            self._check_invariants(project)
        except InvalidArgument:
            self.db.rollback()
            raise
        try:
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            raise TransientError("Project was modified concurrently, please retry") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to update project %s: %s", project_id, exc)
            raise TransientError("Failed to save project") from exc

        file_path = project.file_path
        file_error = None
        title_changed = project.title != old_title
        if file_format or title_changed:
            try:
                folder = None
                if title_changed:
                    folder = self.documents.rename_project_folder(old_title, project.title)
                    # Old document name no longer matches its folder
                    if folder and file_path:
                        self.documents.delete_existing(file_path.replace(
                            self.documents.folder_for(old_title), folder, 1
                        ))
                        file_path = None
                        project.file_path = None
                        self.db.commit()
                if not folder and file_format:
                    folder = self.documents.create_project_folder(project.title)
                if file_format and folder:
                    file_path = self.write_document(project, file_format, folder)
            except Exception as exc:
                self.db.rollback()
                logger.exception("File update error for project %s", project.id)
                file_error = f"Failed to update project file: {exc}"

        return {"project": serialize_project(project), "file_path": file_path, "file_error": file_error}

    def expiring(self) -> List[Project]:
        """Active projects with a domain expiry, soonest first."""
        return (
            self.db.query(Project)
            .filter(Project.is_active.is_(True), Project.domain_end_date.isnot(None))
            .order_by(Project.domain_end_date.asc())
            .all()
        )
