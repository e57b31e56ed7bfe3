"""
Audit Log Model — Append-only, hash-chained trail of renewal events.
"""
from sqlalchemy import Column, String, Integer, DateTime, JSON

from app.database import Base
from app.utils.dates import utcnow


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    # No FK: the trail outlives hard-deleted projects
    project_id = Column(String(36), nullable=False, index=True)

    action = Column(String(50), nullable=False)  # RENEWAL_CONFIRMED

    payload = Column(JSON, default=dict)
    payload_hash = Column(String(64))       # SHA-256(previous_hash + SHA-256(payload))
    previous_hash = Column(String(64))

    ip_address = Column(String(45))

    log_metadata = Column(JSON, default=dict)
    timestamp = Column(DateTime, default=utcnow)
