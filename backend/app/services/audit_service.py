"""
Audit Service — Hash-chained trail of payment and renewal events per project.

Each entry stores its payload and SHA-256(previous entry's hash + payload hash),
so editing any payload, hash or link breaks verification from that entry on.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.audit import AuditLog
from app.utils.dates import utcnow
from app.utils.hashing import generate_chain_hash


class AuditService:

    @staticmethod
    def _head_hash(db: Session, project_id: str) -> str:
        head = (
            db.query(AuditLog.payload_hash)
            .filter(AuditLog.project_id == project_id)
            .order_by(AuditLog.id.desc())
            .first()
        )
        return head[0] if head else ""

    @staticmethod
    def log(
        db: Session,
        project_id: str,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        """Append `action` to the project's chain and commit it.

        `metadata` is stored alongside the entry but is not part of the hash.
        """
        payload = payload or {}
        previous_hash = AuditService._head_hash(db, project_id)

        entry = AuditLog(
            project_id=project_id,
            action=action,
            payload=payload,
            payload_hash=generate_chain_hash(payload, previous_hash),
            previous_hash=previous_hash,
            ip_address=ip_address,
            log_metadata=metadata or {},
            timestamp=utcnow(),
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def get_trail(db: Session, project_id: str) -> List[AuditLog]:
        return (
            db.query(AuditLog)
            .filter(AuditLog.project_id == project_id)
            .order_by(AuditLog.id.asc())
            .all()
        )

    @staticmethod
    def verify_chain(db: Session, project_id: str) -> Dict[str, Any]:
        """Walk the chain oldest-first, recomputing every hash.

        Returns ``valid``, ``total_entries`` and ``broken_at`` (the id of the
        first entry that does not check out, or None).
        """
        entries = AuditService.get_trail(db, project_id)

        previous_hash = ""
        for entry in entries:
            recomputed = generate_chain_hash(entry.payload or {}, previous_hash)
            if entry.previous_hash != previous_hash or entry.payload_hash != recomputed:
                return {
                    "valid": False,
                    "total_entries": len(entries),
                    "broken_at": entry.id,
                    "message": f"Chain broken at entry {entry.id} ({entry.action})",
                }
            previous_hash = entry.payload_hash

        return {"valid": True, "total_entries": len(entries), "broken_at": None}
