"""Registration business logic."""
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from eventsync.db.models import Event, ProblemStatement, Registration
from eventsync.core.constants import REGISTRATION_UPDATABLE_FIELDS
from eventsync.core.exceptions import NotFoundError
from eventsync.core.sanitization import (
    sanitize_members,
    sanitize_name,
    sanitize_reg_code,
    sanitize_text,
)
from eventsync.core.utils import generate_reg_code, is_registration_open

# Column widths of the free-text registration fields
TEXT_FIELD_LIMITS = {"college_name": 200, "contact_number": 32, "email": 254}


def _check_team_size(team_size: int, member_count: int, max_team_size: int) -> int:
    team_size = int(team_size)
    if team_size < 1:
        raise ValueError("Team size must be at least 1")
    if team_size > max_team_size:
        raise ValueError(f"Team size cannot exceed {max_team_size}")
    if member_count > team_size:
        raise ValueError("More team members than the team size allows")
    return team_size


def clean_registration_updates(registration: Registration, updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a partial update submitted with a registration code.

    None values are dropped; unknown fields are rejected.

    Raises:
        ValueError: If a field is not editable or a value is invalid
    """
    cleaned = {}
    for field, value in updates.items():
        if value is None:
            continue
        if field not in REGISTRATION_UPDATABLE_FIELDS:
            raise ValueError(f"Field cannot be updated: {field}")
        if field == "team_name":
            value = sanitize_name(value, "Team name")
        elif field == "team_size":
            value = _check_team_size(
                value,
                len(registration.team_members or []),
                registration.event.max_team_size,
            )
        else:
            value = sanitize_text(str(value), max_length=TEXT_FIELD_LIMITS[field])
        cleaned[field] = value
    return cleaned


def get_registration_by_code(db: Session, reg_code: str) -> Optional[Registration]:
    return db.query(Registration).filter(Registration.reg_code == reg_code).first()


def get_registration(db: Session, registration_id: str) -> Optional[Registration]:
    return db.query(Registration).filter(Registration.id == registration_id).first()


def submit_registration(
    db: Session,
    event_id: str,
    problem_statement_id: str,
    team_name: str,
    team_members: List[str],
    college_name: str = "",
    contact_number: str = "",
    email: str = "",
    team_size: Optional[int] = None,
    reg_code: Optional[str] = None,
) -> Registration:
    """
    Create a registration, or edit the one holding ``reg_code``.

    Args:
        db: Database session
        event_id: Event being registered for
        problem_statement_id: Chosen problem statement (must belong to the event)
        team_members: Ordered member names; blank entries are dropped
        team_size: Declared team size (defaults to the member count)
        reg_code: Existing registration code to edit, or a code to claim

    Returns:
        The stored registration

    Raises:
        NotFoundError: If the event or problem statement does not exist
        ValueError: If registration is closed, the registration is locked,
                    the code belongs to another event, or input is invalid
    """
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")

    if not is_registration_open(event.is_active, event.registration_deadline):
        raise ValueError("Registration is closed for this event")

    problem = db.query(ProblemStatement).filter(
        ProblemStatement.id == problem_statement_id,
        ProblemStatement.event_id == event_id
    ).first()
    if not problem:
        raise NotFoundError("Problem statement not found")

    members = sanitize_members(team_members)
    if not members:
        raise ValueError("At least one team member is required")

    fields = {
        "problem_statement_id": problem_statement_id,
        "team_name": sanitize_name(team_name, "Team name"),
        "college_name": sanitize_text(college_name or "", max_length=TEXT_FIELD_LIMITS["college_name"]),
        "contact_number": sanitize_text(contact_number or "", max_length=TEXT_FIELD_LIMITS["contact_number"]),
        "email": sanitize_text(email or "", max_length=TEXT_FIELD_LIMITS["email"]),
        "team_members": members,
        "team_size": _check_team_size(
            team_size if team_size is not None else len(members),
            len(members),
            event.max_team_size,
        ),
    }

    if reg_code:
        reg_code = sanitize_reg_code(reg_code)
        existing = get_registration_by_code(db, reg_code)
        if existing:
            if existing.event_id != event_id:
                raise ValueError("Registration code belongs to a different event")
            if existing.is_locked:
                raise ValueError("Registration is locked")
            for field, value in fields.items():
                setattr(existing, field, value)
            db.commit()
            db.refresh(existing)
            return existing

    # Try to create the registration with a unique code
    for _ in range(3):
        registration = Registration(
            event_id=event_id,
            reg_code=reg_code or generate_reg_code(),
            **fields,
        )
        try:
            db.add(registration)
            db.commit()
            db.refresh(registration)
            return registration
        except IntegrityError:
            db.rollback()
            if reg_code:
                raise ValueError("Registration code is already taken")
            continue

    raise ValueError("Failed to generate unique registration code")


def list_registrations(
    db: Session,
    event_id: Optional[str] = None,
    problem_statement_id: Optional[str] = None,
) -> List[Registration]:
    """Registrations filtered by event and/or problem statement, newest first."""
    query = db.query(Registration)
    if event_id:
        query = query.filter(Registration.event_id == event_id)
    if problem_statement_id:
        query = query.filter(Registration.problem_statement_id == problem_statement_id)
    return query.order_by(Registration.created_at.desc()).all()


def toggle_lock(db: Session, registration_id: str) -> Optional[Registration]:
    """Flip the admin lock. Returns None if the registration does not exist."""
    registration = get_registration(db, registration_id)
    if not registration:
        return None

    registration.is_locked = not registration.is_locked
    db.commit()
    db.refresh(registration)
    return registration
