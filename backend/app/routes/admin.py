"""
Admin Routes — Renewal audit trail access.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.schemas import AuditLogEntry
from app.services.audit_service import AuditService

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/audit/{project_id}", response_model=list[AuditLogEntry])
def get_audit_trail(project_id: str, db: Session = Depends(get_db)):
    """Get the full audit trail for a project."""
    logs = AuditService.get_trail(db, project_id)

    if not logs:
        raise HTTPException(status_code=404, detail="No audit logs found for this project")

    return logs


@router.get("/audit/{project_id}/verify")
def verify_audit_chain(project_id: str, db: Session = Depends(get_db)):
    """Verify the integrity of the audit hash chain for a project."""
    return AuditService.verify_chain(db, project_id)
