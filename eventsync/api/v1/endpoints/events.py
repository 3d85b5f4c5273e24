"""Event and problem statement endpoints."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from eventsync.api.deps import get_db, get_coordinator, verify_admin_token
from eventsync.schemas import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventDetail,
    ProblemCreate,
    ProblemResponse,
    SuccessResponse,
)
from eventsync.services.events import (
    create_event,
    delete_event,
    get_event,
    is_event_open,
    list_events,
    update_event,
)
from eventsync.services.problems import create_problem, list_problems
from eventsync.services.sync import SyncCoordinator
from eventsync.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=List[EventResponse])
async def list_events_endpoint(db: Session = Depends(get_db)):
    """Events currently accepting registrations, newest first."""
    return [event for event in list_events(db, active_only=True) if is_event_open(event)]


@router.get("/{event_id}", response_model=EventDetail)
async def get_event_endpoint(event_id: str, db: Session = Depends(get_db)):
    """Event with its problem statements."""
    event = get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    detail = EventDetail.model_validate(event)
    detail.registration_open = is_event_open(event)
    return detail


@router.post("", response_model=EventResponse, dependencies=[Depends(verify_admin_token)])
async def create_event_endpoint(
    payload: EventCreate,
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """
    Create an event (admin only).

    When automatic sync is off the spreadsheet is created right away; a
    gateway failure is logged and the event is still returned.
    """
    event = create_event(db, **payload.model_dump())
    logger.info("event_created", event_id=event.id)

    if not coordinator.started:
        await coordinator.run_logged("ensureEvent", coordinator.ensure_event_spreadsheet, event.id)
        db.refresh(event)
    return event


@router.patch("/{event_id}", response_model=EventResponse, dependencies=[Depends(verify_admin_token)])
async def update_event_endpoint(event_id: str, payload: EventUpdate, db: Session = Depends(get_db)):
    event = update_event(db, event_id, **payload.model_dump(exclude_unset=True))
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.delete("/{event_id}", response_model=SuccessResponse, dependencies=[Depends(verify_admin_token)])
async def delete_event_endpoint(event_id: str, db: Session = Depends(get_db)):
    """Delete an event with its problem statements, registrations and attendance."""
    if not delete_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    logger.info("event_deleted", event_id=event_id)
    return SuccessResponse(message="Event deleted")


@router.get("/{event_id}/problems", response_model=List[ProblemResponse])
async def list_problems_endpoint(event_id: str, db: Session = Depends(get_db)):
    if not get_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return list_problems(db, event_id)


@router.post(
    "/{event_id}/problems",
    response_model=ProblemResponse,
    dependencies=[Depends(verify_admin_token)],
)
async def create_problem_endpoint(
    event_id: str,
    payload: ProblemCreate,
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Add a problem statement to an event (admin only) and create its tab."""
    problem = create_problem(db, event_id, payload.title, payload.description)
    logger.info("problem_created", event_id=event_id, problem_id=problem.id)

    if not coordinator.started:
        await coordinator.run_logged(
            "ensureProblem", coordinator.ensure_problem_tab, event_id, problem.id
        )
        db.refresh(problem)
    return problem
