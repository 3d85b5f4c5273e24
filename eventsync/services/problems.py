"""Problem statement business logic."""
from typing import List, Optional
from sqlalchemy.orm import Session

from eventsync.db.models import Event, ProblemStatement
from eventsync.core.exceptions import NotFoundError
from eventsync.core.sanitization import MAX_DESCRIPTION_LENGTH, sanitize_name, sanitize_text


def create_problem(db: Session, event_id: str, title: str, description: str = "") -> ProblemStatement:
    """Create a problem statement for an event."""
    title = sanitize_name(title, "Title")
    description = sanitize_text(description or "", max_length=MAX_DESCRIPTION_LENGTH)

    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")

    existing = db.query(ProblemStatement).filter(
        ProblemStatement.event_id == event_id,
        ProblemStatement.title == title
    ).first()
    if existing:
        # Titles name the spreadsheet tabs, so they must be unique per event
        raise ValueError("Problem statement with this title already exists")

    problem = ProblemStatement(event_id=event_id, title=title, description=description)
    db.add(problem)
    db.commit()
    db.refresh(problem)
    return problem


def get_problem(db: Session, problem_id: str) -> Optional[ProblemStatement]:
    return db.query(ProblemStatement).filter(ProblemStatement.id == problem_id).first()


def list_problems(db: Session, event_id: str) -> List[ProblemStatement]:
    """Problem statements of an event, newest first."""
    return db.query(ProblemStatement).filter(
        ProblemStatement.event_id == event_id
    ).order_by(ProblemStatement.created_at.desc()).all()


def update_problem(
    db: Session,
    problem_id: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> Optional[ProblemStatement]:
    problem = get_problem(db, problem_id)
    if not problem:
        return None

    if title is not None:
        title = sanitize_name(title, "Title")
        duplicate = db.query(ProblemStatement).filter(
            ProblemStatement.event_id == problem.event_id,
            ProblemStatement.title == title,
            ProblemStatement.id != problem_id
        ).first()
        if duplicate:
            raise ValueError("Problem statement with this title already exists")
        problem.title = title
    if description is not None:
        problem.description = sanitize_text(description, max_length=MAX_DESCRIPTION_LENGTH)
    db.commit()
    db.refresh(problem)
    return problem


def delete_problem(db: Session, problem_id: str) -> bool:
    problem = get_problem(db, problem_id)
    if not problem:
        return False

    db.delete(problem)
    db.commit()
    return True
