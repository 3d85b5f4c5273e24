"""Event business logic."""
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from eventsync.db.models import Event
from eventsync.core.sanitization import MAX_DESCRIPTION_LENGTH, sanitize_name, sanitize_text
from eventsync.core.utils import is_registration_open, to_utc

EDITABLE_FIELDS = ("name", "description", "max_team_size", "is_active", "registration_deadline")


def _clean_event_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for field, value in fields.items():
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown event field: {field}")
        if field == "name":
            value = sanitize_name(value, "Event name")
        elif field == "description":
            value = sanitize_text(value or "", max_length=MAX_DESCRIPTION_LENGTH)
        elif field == "max_team_size":
            if value is None or int(value) < 1:
                raise ValueError("Max team size must be at least 1")
            value = int(value)
        elif field == "registration_deadline" and value is not None:
            value = to_utc(value)
        cleaned[field] = value
    return cleaned


def create_event(
    db: Session,
    name: str,
    description: str = "",
    max_team_size: int = 4,
    is_active: bool = True,
    registration_deadline: Optional[datetime] = None,
) -> Event:
    """Create a new event."""
    fields = _clean_event_fields({
        "name": name,
        "description": description,
        "max_team_size": max_team_size,
        "is_active": is_active,
        "registration_deadline": registration_deadline,
    })
    event = Event(**fields)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def get_event(db: Session, event_id: str) -> Optional[Event]:
    return db.query(Event).filter(Event.id == event_id).first()


def list_events(db: Session, active_only: bool = False) -> List[Event]:
    """Events, newest first."""
    query = db.query(Event)
    if active_only:
        query = query.filter(Event.is_active.is_(True))
    return query.order_by(Event.created_at.desc()).all()


def update_event(db: Session, event_id: str, **fields) -> Optional[Event]:
    """Update an event. Returns None if it does not exist."""
    event = get_event(db, event_id)
    if not event:
        return None

    for field, value in _clean_event_fields(fields).items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, event_id: str) -> bool:
    """Delete an event with its problem statements and registrations."""
    event = get_event(db, event_id)
    if not event:
        return False

    db.delete(event)
    db.commit()
    return True


def is_event_open(event: Event) -> bool:
    return is_registration_open(event.is_active, event.registration_deadline)


def event_summary(event: Event) -> Dict[str, Any]:
    """Event with its problem statements, as sent to the bulk sync action."""
    return {
        "id": event.id,
        "name": event.name,
        "sheet_id": event.sheet_id,
        "problem_statements": [
            {"id": problem.id, "title": problem.title, "sheet_tab_name": problem.sheet_tab_name}
            for problem in event.problem_statements
        ],
    }
