"""
User Model — Dashboard operators.
Rows are provisioned by the authentication service; this API only reads them.
"""
from sqlalchemy import Column, String, DateTime

from app.database import Base
from app.utils.dates import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    fullname = Column(String(128), nullable=False)
    email = Column(String(254), nullable=False)

    created_at = Column(DateTime, default=utcnow)
