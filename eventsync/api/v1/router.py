"""Main API router for v1."""
from fastapi import APIRouter

from eventsync.api.v1.endpoints import auth, events, problems, registrations, attendance, admin, sync

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(problems.router, prefix="/problems", tags=["Problem Statements"])
api_router.include_router(registrations.router, tags=["Registrations"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(sync.router, prefix="/admin/sync", tags=["Sync"])
