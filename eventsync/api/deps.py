"""Shared API dependencies."""
from fastapi import Request

from eventsync.db import get_db, get_db_context
from eventsync.core.security import verify_admin_token
from eventsync.services.sheets_gateway import SheetsGateway
from eventsync.services.sync import SyncCoordinator


def get_coordinator(request: Request) -> SyncCoordinator:
    """The application's sync coordinator, created in the lifespan handler."""
    return request.app.state.coordinator


def get_gateway(request: Request) -> SheetsGateway:
    return request.app.state.gateway


def attendance_url(request: Request, path: str) -> str:
    """Absolute URL for an attendance path on this server."""
    return str(request.base_url).rstrip("/") + path


__all__ = [
    "get_db",
    "get_db_context",
    "verify_admin_token",
    "get_coordinator",
    "get_gateway",
    "attendance_url",
]
