"""
Project Model — Domain/web projects and their append-only renewal history.
"""
from sqlalchemy import (
    Column, String, Integer, DateTime, Boolean, Text, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.dates import utcnow

PROJECT_STATUSES = ("pending", "in-progress", "completed", "on-hold")


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text)

    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True, index=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(16), default="pending")  # pending | in-progress | completed | on-hold
    start_date = Column(DateTime, default=utcnow)
    end_date = Column(DateTime, nullable=True)
    budget = Column(Integer, nullable=True)

    domain_name = Column(String(253), index=True)
    domain_start_date = Column(DateTime, nullable=True)
    domain_end_date = Column(DateTime, nullable=True)

    is_active = Column(Boolean, default=True)
    file_path = Column(String(1024), nullable=True)
    renewal_price = Column(Integer, default=50000)  # Paise

    # Optimistic concurrency: every UPDATE checks and bumps this counter
    version = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    customer = relationship("Customer", lazy="joined")
    creator = relationship("User", lazy="joined")
    renewal_history = relationship(
        "RenewalRecord",
        back_populates="project",
        order_by="RenewalRecord.id",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}


class RenewalRecord(Base):
    __tablename__ = "renewal_records"
    __table_args__ = (
        UniqueConstraint("project_id", "payment_id", name="uq_renewal_project_payment"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)

    renewed_at = Column(DateTime, default=utcnow, nullable=False)
    new_end_date = Column(DateTime, nullable=False)
    renewed_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    payment_id = Column(String(64), nullable=False)  # Provider payment id, idempotency key
    amount = Column(Integer, nullable=False)         # Paise

    project = relationship("Project", back_populates="renewal_history")
