"""
Database Engine & Session Management
SQLAlchemy setup with dependency injection for FastAPI.
"""
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import get_settings

settings = get_settings()

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # Required for SQLite

    # Ensure data directory exists for file-backed databases
    db_path = settings.DATABASE_URL.replace("sqlite:///", "", 1)
    if settings.DATABASE_URL.startswith("sqlite:///") and db_path != ":memory:" and os.path.dirname(db_path):
        os.makedirs(os.path.dirname(db_path), exist_ok=True)

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=connect_args,
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a database session, auto-closes on finish."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create all tables. Called once at application startup."""
    from app.models import user as _user_model           # noqa: F401
    from app.models import customer as _customer_model   # noqa: F401
    from app.models import project as _project_model     # noqa: F401
    from app.models import audit as _audit_model         # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
