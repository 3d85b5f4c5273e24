"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from sqlalchemy import text

from eventsync.api.v1.router import api_router
from eventsync.api.deps import get_coordinator, get_db
from eventsync.api.errors import register_exception_handlers
from eventsync.core.config import settings
from eventsync.core.rate_limit import limiter
from eventsync.core.logging_config import setup_logging, get_logger
from eventsync.db import SessionLocal, change_feed
from eventsync.middleware import LoggingMiddleware
from eventsync.services.sheets_gateway import SheetsGateway
from eventsync.services.sync import SyncCoordinator

# Initialize structured logging
setup_logging(level=settings.LOG_LEVEL)
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    settings.validate_production_config()

logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the gateway client and sync coordinator for the app's lifetime.

    Automatic sync subscribes to the change feed only when a gateway URL is
    configured and SHEETS_AUTO_SYNC is on.
    """
    gateway = SheetsGateway(settings.SHEETS_GATEWAY_URL, timeout=settings.SHEETS_GATEWAY_TIMEOUT)
    coordinator = SyncCoordinator(
        SessionLocal,
        gateway,
        feed=change_feed,
        sync_on_update=settings.SYNC_ON_REGISTRATION_UPDATE,
    )
    app.state.gateway = gateway
    app.state.coordinator = coordinator

    if gateway.configured and settings.SHEETS_AUTO_SYNC:
        coordinator.start()
    else:
        logger.info("auto_sync_disabled", gateway_configured=gateway.configured)

    try:
        yield
    finally:
        coordinator.stop()
        await coordinator.wait_idle()
        await gateway.aclose()
        logger.info("application_stopped")


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Service errors -> HTTP status codes
register_exception_handlers(app)

app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response

# CORS middleware - configured for cookie-based auth
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check(
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """
    Health check endpoint.

    Returns:
        - status: "healthy" or "unhealthy"
        - database: Database connection status
        - sync: Whether automatic sync is running, plus in-flight key stats

    Returns 503 if database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "database": {"status": "connected"},
        "sync": {
            "auto_sync": coordinator.started,
            "inflight": coordinator.inflight.get_stats(
                stale_after_seconds=settings.INFLIGHT_STALE_AFTER_SECONDS
            ),
        },
    }

    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = f"error: {str(e)}"
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
