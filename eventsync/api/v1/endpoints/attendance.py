"""Team attendance endpoints."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from eventsync.api.deps import get_db
from eventsync.schemas import AttendanceToggleRequest, AttendanceToggleResponse, TeamAttendance
from eventsync.services.attendance import get_team_attendance, toggle_attendance
from eventsync.core.rate_limit import limiter, RATE_LIMITS
from eventsync.core.sanitization import sanitize_reg_code

router = APIRouter()


@router.get("/{reg_code}", response_model=TeamAttendance)
@limiter.limit(RATE_LIMITS["attendance_read"])
async def get_attendance_endpoint(request: Request, reg_code: str, db: Session = Depends(get_db)):
    """Team members with their presence and the remaining updates."""
    return get_team_attendance(db, sanitize_reg_code(reg_code))


@router.post("/{reg_code}/toggle", response_model=AttendanceToggleResponse)
@limiter.limit(RATE_LIMITS["attendance_toggle"])
async def toggle_attendance_endpoint(
    request: Request,
    reg_code: str,
    payload: AttendanceToggleRequest,
    db: Session = Depends(get_db),
):
    """
    Flip one member's presence.

    ``expected_count`` is the attendance_update_count the client last saw.
    If another update got there first, or the limit is used up, the change is
    reverted and the response is 409 with the current count:

        {
            "detail": "Attendance update rejected: concurrent updates or limit reached",
            "attendance_update_count": 2
        }
    """
    return toggle_attendance(
        db, sanitize_reg_code(reg_code), payload.member_name, payload.expected_count
    )
