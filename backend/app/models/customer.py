"""
Customer Model — Clients that own domain/web projects.
"""
from sqlalchemy import Column, String, DateTime, Boolean, Text

from app.database import Base
from app.utils.dates import utcnow


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    email = Column(String(254), unique=True, nullable=False, index=True)  # Stored lower-case
    phone = Column(String(32))
    address = Column(String(512))
    company = Column(String(128))
    notes = Column(Text)

    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
