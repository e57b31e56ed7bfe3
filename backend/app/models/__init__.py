from app.models.user import User
from app.models.customer import Customer
from app.models.project import Project, RenewalRecord, PROJECT_STATUSES
from app.models.audit import AuditLog

__all__ = ["User", "Customer", "Project", "RenewalRecord", "PROJECT_STATUSES", "AuditLog"]
