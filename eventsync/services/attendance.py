"""Attendance business logic.

Each team may change its members' attendance a limited number of times. The
counter lives on the registration row and is advanced with a conditional
UPDATE (compare-and-swap); a toggle that loses the race is reverted.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from eventsync.db.models import Attendance, Event, Registration
from eventsync.core.config import settings
from eventsync.core.constants import ATTENDANCE_PATH_PREFIX
from eventsync.core.exceptions import LimitExceededError, NotFoundError
from eventsync.core.logging_config import get_logger
from eventsync.core.utils import utcnow

logger = get_logger(__name__)


def _get_registration(db: Session, reg_code: str) -> Registration:
    registration = db.query(Registration).filter(Registration.reg_code == reg_code).first()
    if not registration:
        raise NotFoundError("Registration not found")
    return registration


def _presence_map(db: Session, registration_id: str) -> Dict[str, bool]:
    rows = db.query(Attendance).filter(Attendance.registration_id == registration_id).all()
    return {row.member_name: row.is_present for row in rows}


def _set_presence(db: Session, registration_id: str, member_name: str, is_present: bool) -> None:
    """Upsert the attendance row for one member."""
    for attempt in range(2):
        row = db.query(Attendance).filter(
            Attendance.registration_id == registration_id,
            Attendance.member_name == member_name
        ).first()
        if row:
            row.is_present = is_present
            row.last_updated = utcnow()
        else:
            db.add(Attendance(
                registration_id=registration_id,
                member_name=member_name,
                is_present=is_present,
                last_updated=utcnow(),
            ))
        try:
            db.commit()
            return
        except IntegrityError:
            # A concurrent toggle inserted the row first; update it instead
            db.rollback()
            if attempt:
                raise


def toggle_attendance(
    db: Session,
    reg_code: str,
    member_name: str,
    expected_count: int,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Flip one member's presence and consume one attendance update.

    Args:
        db: Database session
        reg_code: Team registration code
        member_name: Member whose presence is flipped
        expected_count: attendance_update_count the caller last saw
        limit: Maximum number of updates (defaults to ATTENDANCE_UPDATE_LIMIT)

    Returns:
        Dict with member_name, is_present, attendance_update_count and
        remaining_updates

    Raises:
        LimitExceededError: If the limit is reached or another update won the race
        NotFoundError: If the registration code is unknown
        ValueError: If the member is not on the team
    """
    if limit is None:
        limit = settings.ATTENDANCE_UPDATE_LIMIT

    if expected_count >= limit:
        raise LimitExceededError(
            "Attendance update limit reached",
            attendance_update_count=expected_count,
        )

    registration = _get_registration(db, reg_code)
    if member_name not in (registration.team_members or []):
        raise ValueError("Member is not part of this team")

    registration_id = registration.id
    previous = _presence_map(db, registration_id).get(member_name, False)
    _set_presence(db, registration_id, member_name, not previous)

    try:
        updated = db.query(Registration).filter(
            Registration.id == registration_id,
            Registration.attendance_update_count == expected_count
        ).update(
            {Registration.attendance_update_count: expected_count + 1},
            synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        _set_presence(db, registration_id, member_name, previous)
        logger.error("attendance_update_failed", reg_code=reg_code, member_name=member_name)
        raise

    if not updated:
        _set_presence(db, registration_id, member_name, previous)
        current = db.query(Registration.attendance_update_count).filter(
            Registration.id == registration_id
        ).scalar()
        logger.warning(
            "attendance_conflict",
            reg_code=reg_code,
            expected_count=expected_count,
            current_count=current,
        )
        raise LimitExceededError(
            "Attendance update rejected: concurrent updates or limit reached",
            attendance_update_count=current,
        )

    new_count = expected_count + 1
    logger.info("attendance_toggled", reg_code=reg_code, is_present=not previous, count=new_count)
    return {
        "member_name": member_name,
        "is_present": not previous,
        "attendance_update_count": new_count,
        "remaining_updates": max(0, limit - new_count),
    }


def get_team_attendance(db: Session, reg_code: str, limit: Optional[int] = None) -> Dict[str, Any]:
    """Registration with each member's presence and the remaining updates."""
    if limit is None:
        limit = settings.ATTENDANCE_UPDATE_LIMIT

    registration = _get_registration(db, reg_code)
    presence = _presence_map(db, registration.id)
    count = registration.attendance_update_count

    return {
        "registration": registration,
        "members": [
            {"member_name": name, "is_present": presence.get(name, False)}
            for name in registration.team_members or []
        ],
        "attendance_update_count": count,
        "remaining_updates": max(0, limit - count),
    }


def get_team_attendance_url(db: Session, reg_code: str) -> str:
    """Path of the team's attendance page."""
    registration = _get_registration(db, reg_code)
    return f"{ATTENDANCE_PATH_PREFIX}{registration.reg_code}"


def get_event_attendance_overview(
    db: Session, event_id: str, problem_statement_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Attendance of every team in an event.

    Raises:
        NotFoundError: If the event does not exist
    """
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")

    query = db.query(Registration).filter(Registration.event_id == event_id)
    if problem_statement_id:
        query = query.filter(Registration.problem_statement_id == problem_statement_id)
    registrations = query.order_by(Registration.team_name).all()

    present_by_registration: Dict[str, Dict[str, bool]] = {}
    if registrations:
        rows = db.query(Attendance).filter(
            Attendance.registration_id.in_([r.id for r in registrations])
        ).all()
        for row in rows:
            present_by_registration.setdefault(row.registration_id, {})[row.member_name] = row.is_present

    teams: List[Dict[str, Any]] = []
    total_members = 0
    total_present = 0
    for registration in registrations:
        presence = present_by_registration.get(registration.id, {})
        members = [
            {"member_name": name, "is_present": presence.get(name, False)}
            for name in registration.team_members or []
        ]
        present = sum(1 for m in members if m["is_present"])
        total_members += len(members)
        total_present += present
        teams.append({
            "registration_id": registration.id,
            "team_name": registration.team_name,
            "reg_code": registration.reg_code,
            "problem_statement_id": registration.problem_statement_id,
            "attendance_update_count": registration.attendance_update_count,
            "members": members,
            "present_count": present,
        })

    return {
        "event_id": event.id,
        "event_name": event.name,
        "problem_statement_id": problem_statement_id,
        "teams": teams,
        "total_teams": len(teams),
        "total_members": total_members,
        "total_present": total_present,
    }
