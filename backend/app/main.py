"""
Project Renewal Dashboard — FastAPI Application Entry Point

Aggregates all routers, configures middleware and logging, builds the
payment/document/email collaborators, and initializes the database on startup.
"""
import logging
import os
import time
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.database import init_db
from app.errors import APIError
from app.routes import admin_router, customer_router, payment_router, project_router
from app.services.document_service import DocumentGenerator
from app.services.notification_service import NotificationService
from app.services.payment_gateway import RazorpayClient

settings = get_settings()
logger = logging.getLogger("app")

# ─── Application Instance ───────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Admin dashboard API for customers and domain/web projects. "
        "Covers customer and project records, project documents, and "
        "Razorpay-backed domain renewals with signature verification."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# ─── Startup ─────────────────────────────────────────────────────────
BOOT_TIME = time.time()


def configure_logging() -> None:
    """Stream to stderr and append to LOG_DIR/server.log."""
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL)
    if not any(getattr(h, "_dashboard", False) for h in root.handlers):
        for handler in (
            logging.StreamHandler(),
            logging.FileHandler(os.path.join(settings.LOG_DIR, "server.log"), encoding="utf-8"),
        ):
            handler.setFormatter(formatter)
            handler._dashboard = True
            root.addHandler(handler)


@app.on_event("startup")
def on_startup():
    """Initialize logging, database tables and external collaborators."""
    configure_logging()
    init_db()

    app.state.payment_gateway = RazorpayClient.from_settings(settings)
    app.state.document_generator = DocumentGenerator.from_settings(settings)
    app.state.notification_service = NotificationService.from_settings(settings)

    logger.info(
        "\n%s\n  %s v%s\n  TIME: %s\n  RAZORPAY KEY: %s\n  SMTP: %s\n  DATABASE: %s\n  DEBUG: %s\n%s",
        "=" * 60,
        settings.APP_NAME,
        settings.APP_VERSION,
        datetime.now().isoformat(),
        "[OK] Loaded" if settings.RAZORPAY_KEY_ID and settings.RAZORPAY_KEY_SECRET else "[!] Missing",
        settings.SMTP_HOST or "[!] Not configured (emails are logged only)",
        settings.DATABASE_URL,
        settings.DEBUG,
        "=" * 60,
    )


@app.on_event("shutdown")
def on_shutdown():
    gateway = getattr(app.state, "payment_gateway", None)
    if gateway is not None:
        gateway.close()


# ─── Error Handling ──────────────────────────────────────────────────
@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are caller errors: 400 INVALID_ARGUMENT."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={
            "detail": f"{location}: {message}" if location else message,
            "error_code": "INVALID_ARGUMENT",
        },
    )


# ─── Middleware ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with timing."""
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 1)

    if request.url.path.startswith("/api"):
        logger.info("%s %s -> %s (%sms)", request.method, request.url.path, response.status_code, duration)

    return response


# ─── API Routers ─────────────────────────────────────────────────────
app.include_router(customer_router)
app.include_router(project_router)
app.include_router(payment_router)
app.include_router(admin_router)


@app.get("/health", tags=["Health"])
def deep_health():
    """Detailed health check including dependency statuses."""
    from app.database import SessionLocal
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    db_ok = False
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as exc:
        logger.warning("Health check database probe failed: %s", exc)
    finally:
        db.close()

    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "payments": "configured" if settings.RAZORPAY_KEY_ID and settings.RAZORPAY_KEY_SECRET else "unconfigured",
        "email": "smtp" if settings.SMTP_HOST else "log-only",
        "uptime_seconds": round(time.time() - BOOT_TIME, 1),
        "version": settings.APP_VERSION,
    }
