"""Registration endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from eventsync.api.deps import attendance_url, get_coordinator, get_db
from eventsync.schemas import (
    AttendanceLinkResponse,
    RegistrationResponse,
    RegistrationSubmit,
    RegistrationSubmitResponse,
    RegistrationUpdate,
    SuccessResponse,
)
from eventsync.services.attendance import get_team_attendance_url
from eventsync.services.registrations import get_registration_by_code, submit_registration
from eventsync.services.sync import SyncCoordinator
from eventsync.core.exceptions import RemoteError
from eventsync.core.rate_limit import limiter, RATE_LIMITS
from eventsync.core.sanitization import sanitize_reg_code
from eventsync.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/events/{event_id}/registrations", response_model=RegistrationSubmitResponse)
@limiter.limit(RATE_LIMITS["register"])
async def submit_registration_endpoint(
    request: Request,
    event_id: str,
    payload: RegistrationSubmit,
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """
    Register a team, or edit a registration by passing its reg_code.

    The registration is stored even if the spreadsheet sync fails.

    Example:
        Request:
            POST /api/v1/events/3f0c.../registrations
            {
                "problem_statement_id": "9a1b...",
                "team_name": "Null Pointers",
                "college_name": "City College",
                "contact_number": "5550100",
                "email": "team@example.com",
                "team_members": ["Ada", "Linus", ""]
            }

        Response (200):
            {
                "registration": {..., "reg_code": "k3x9q2m7p1ab"},
                "attendance_url": "http://testserver/attendance/k3x9q2m7p1ab"
            }
    """
    registration = submit_registration(db, event_id, **payload.model_dump())
    logger.info("registration_saved", registration_id=registration.id, reg_code=registration.reg_code)

    if not coordinator.started:
        await coordinator.run_logged("upsertReg", coordinator.upsert_registration, registration.id)

    return RegistrationSubmitResponse(
        registration=RegistrationResponse.model_validate(registration),
        attendance_url=attendance_url(request, get_team_attendance_url(db, registration.reg_code)),
    )


@router.patch("/events/{event_id}/registrations/{reg_code}", response_model=SuccessResponse)
@limiter.limit(RATE_LIMITS["register"])
async def update_registration_endpoint(
    request: Request,
    event_id: str,
    reg_code: str,
    payload: RegistrationUpdate,
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """
    Update a registration's details with its code, then sync it.

    Returns 404 for an unknown (code, event) pair and 409 while another update
    for the same code is running. A failed sync does not undo the update.
    """
    reg_code = sanitize_reg_code(reg_code)
    try:
        await coordinator.update_registration_by_code(
            event_id, reg_code, payload.model_dump(exclude_none=True)
        )
    except RemoteError as e:
        logger.warning("registration_update_sync_failed", reg_code=reg_code, error=str(e))
        return SuccessResponse(message="Registration updated; spreadsheet sync failed")
    return SuccessResponse(message="Registration updated")


@router.get("/registrations/{reg_code}", response_model=RegistrationResponse)
@limiter.limit(RATE_LIMITS["attendance_read"])
async def get_registration_endpoint(request: Request, reg_code: str, db: Session = Depends(get_db)):
    registration = get_registration_by_code(db, sanitize_reg_code(reg_code))
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    return registration


@router.get("/registrations/{reg_code}/attendance-link", response_model=AttendanceLinkResponse)
@limiter.limit(RATE_LIMITS["attendance_read"])
async def attendance_link_endpoint(request: Request, reg_code: str, db: Session = Depends(get_db)):
    reg_code = sanitize_reg_code(reg_code)
    path = get_team_attendance_url(db, reg_code)
    return AttendanceLinkResponse(reg_code=reg_code, attendance_url=attendance_url(request, path))
