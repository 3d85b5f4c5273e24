"""Admin endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from eventsync.api.deps import get_coordinator, get_db, get_gateway, verify_admin_token
from eventsync.schemas import EventAttendanceOverview, EventResponse, RegistrationResponse, SyncResult
from eventsync.services.attendance import get_event_attendance_overview
from eventsync.services.events import get_event, list_events
from eventsync.services.problems import get_problem
from eventsync.services.registrations import list_registrations, toggle_lock
from eventsync.services.sheets_gateway import SheetsGateway
from eventsync.services.sync import SyncCoordinator
from eventsync.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter(dependencies=[Depends(verify_admin_token)])


@router.get("/events", response_model=List[EventResponse])
async def list_all_events_endpoint(db: Session = Depends(get_db)):
    """All events, including inactive and closed ones (admin only)."""
    return list_events(db)


@router.get("/events/{event_id}/registrations", response_model=List[RegistrationResponse])
async def list_event_registrations_endpoint(event_id: str, db: Session = Depends(get_db)):
    if not get_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return list_registrations(db, event_id=event_id)


@router.get("/problems/{problem_id}/registrations", response_model=List[RegistrationResponse])
async def list_problem_registrations_endpoint(problem_id: str, db: Session = Depends(get_db)):
    """Registrations for one problem statement, newest first."""
    if not get_problem(db, problem_id):
        raise HTTPException(status_code=404, detail="Problem statement not found")
    return list_registrations(db, problem_statement_id=problem_id)


@router.post("/registrations/{registration_id}/lock", response_model=RegistrationResponse)
async def toggle_lock_endpoint(registration_id: str, db: Session = Depends(get_db)):
    """Lock or unlock a registration. Locked registrations cannot be edited by the team."""
    registration = toggle_lock(db, registration_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    logger.info("registration_lock_toggled", registration_id=registration_id, is_locked=registration.is_locked)
    return registration


@router.get("/events/{event_id}/attendance", response_model=EventAttendanceOverview)
async def event_attendance_endpoint(
    event_id: str,
    problem_statement_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Attendance of every team in the event, optionally for one problem statement."""
    return get_event_attendance_overview(db, event_id, problem_statement_id)


@router.post("/problems/{problem_id}/export", response_model=SyncResult)
async def export_problem_endpoint(
    problem_id: str,
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
    gateway: SheetsGateway = Depends(get_gateway),
):
    """
    Export a problem statement's registrations into its spreadsheet tab.

    Creates the event spreadsheet first if it does not exist yet.
    """
    problem = get_problem(db, problem_id)
    if not problem:
        raise HTTPException(status_code=404, detail="Problem statement not found")

    event = problem.event
    spreadsheet_id = await coordinator.ensure_event_spreadsheet(event.id)
    response = await gateway.export_problem(
        spreadsheet_id, event.id, problem.id, event.name, problem.title
    )
    logger.info("problem_exported", problem_id=problem_id, spreadsheet_id=spreadsheet_id)
    return SyncResult(
        status=response.status,
        message="Export completed",
        details=response.model_dump(by_alias=True, exclude_none=True),
    )
