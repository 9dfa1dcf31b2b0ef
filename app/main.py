"""
Madurai Clean API - FastAPI Application Entry Point

Civic sanitation reporting for Madurai wards.

DESIGN PRINCIPLES:
- Citizens file reports; ward officers and admins move them through the lifecycle
- Officers are alerted in-app for every new report in their ward
- Email is best-effort and never fails a request
- All errors leave the API as {"error": ...} JSON bodies
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config.database import close_db, get_session_local, init_db
from app.config.seed_data import seed_reference_data
from app.core.exceptions import CivicError
from app.core.settings import settings
from app.routes import analytics, auth, awareness, community, feedback, health, notifications, reports, wards
from app.services.email_service import Mailer

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Civic sanitation reporting, triage and community engagement for Madurai",
    debug=settings.DEBUG
)

# Built here rather than lazily so every request shares one configured transport
app.state.mailer = Mailer.from_settings(settings)


@app.exception_handler(CivicError)
async def civic_error_handler(request: Request, exc: CivicError):
    """Map domain errors to their HTTP status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# Pydantic validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Catch Pydantic validation errors and log them."""
    logger.info(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Invalid request", "detail": jsonable_errors(exc)},
    )


# Global exception handler to catch ALL exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    logger.error(f"🔥 Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


def jsonable_errors(exc: RequestValidationError):
    # ctx may hold exception instances, which are not JSON serializable
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in exc.errors()
    ]


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """
    Initialize services on application startup.
    Creates tables and seeds reference data.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    init_db()

    if settings.SEED_ON_STARTUP:
        session = get_session_local()()
        try:
            seed_reference_data(session)
        finally:
            session.close()

    if not app.state.mailer.enabled:
        logger.warning("Email disabled: GMAIL_USER/GMAIL_PASS not set")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")
    close_db()


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(reports.router)
app.include_router(wards.router)
app.include_router(analytics.router)
app.include_router(community.router)
app.include_router(notifications.router)
app.include_router(feedback.router)
app.include_router(awareness.router)


# Root endpoint
@app.get("/")
async def root():
    """
    Service banner with links to docs and health.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "wards": "/wards",
    }
