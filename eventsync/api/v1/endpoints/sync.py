"""Manual spreadsheet sync endpoints (admin only).

Every operation runs under the coordinator's in-flight keys: repeating a
request while the previous one is still running returns 409.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from eventsync.api.deps import get_coordinator, get_db, verify_admin_token
from eventsync.schemas import InFlightStats, SpreadsheetResponse, SuccessResponse, SyncResult
from eventsync.services.events import event_summary, get_event, list_events
from eventsync.services.problems import get_problem
from eventsync.services.sheets_gateway import SheetResponse
from eventsync.services.sync import SyncCoordinator
from eventsync.core.config import settings

router = APIRouter(dependencies=[Depends(verify_admin_token)])


def _result(response: SheetResponse, message: str) -> SyncResult:
    return SyncResult(
        status=response.status,
        message=message,
        details=response.model_dump(by_alias=True, exclude_none=True),
    )


@router.post("/events/{event_id}/spreadsheet", response_model=SpreadsheetResponse)
async def ensure_spreadsheet_endpoint(
    event_id: str, coordinator: SyncCoordinator = Depends(get_coordinator)
):
    spreadsheet_id = await coordinator.ensure_event_spreadsheet(event_id)
    return SpreadsheetResponse(event_id=event_id, spreadsheet_id=spreadsheet_id)


@router.post("/events/{event_id}/problems/{problem_id}/tab", response_model=SuccessResponse)
async def ensure_problem_tab_endpoint(
    event_id: str,
    problem_id: str,
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Create or refresh a problem statement's tab. A repeat while running is skipped."""
    problem = get_problem(db, problem_id)
    if not problem or problem.event_id != event_id:
        raise HTTPException(status_code=404, detail="Problem statement not found")

    await coordinator.ensure_problem_tab(event_id, problem_id)
    return SuccessResponse(message="Problem statement tab synced")


@router.post("/events/{event_id}/problems/{problem_id}/add", response_model=SuccessResponse)
async def add_problem_statement_endpoint(
    event_id: str,
    problem_id: str,
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Add a tab named after the problem title to the event spreadsheet."""
    problem = get_problem(db, problem_id)
    if not problem or problem.event_id != event_id:
        raise HTTPException(status_code=404, detail="Problem statement not found")

    await coordinator.add_problem_statement(event_id, problem_id, problem.title)
    return SuccessResponse(message="Problem statement added to spreadsheet")


@router.post("/events/{event_id}/registrations", response_model=SyncResult)
async def sync_all_registrations_endpoint(
    event_id: str,
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Resync every registration of an event."""
    if not get_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")

    response = await coordinator.sync_all_registrations(event_id)
    return _result(response, "Registrations synced")


@router.post("/bulk", response_model=SyncResult)
async def bulk_sync_endpoint(
    db: Session = Depends(get_db),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Sync all events and their problem statements in one gateway call."""
    events = [event_summary(event) for event in list_events(db)]
    response = await coordinator.bulk_sync(events)
    return _result(response, f"Synced {len(events)} events")


@router.post("/registrations/{registration_id}", response_model=SyncResult)
async def sync_registration_endpoint(
    registration_id: str, coordinator: SyncCoordinator = Depends(get_coordinator)
):
    response = await coordinator.sync_registration(registration_id)
    return _result(response, "Registration synced")


@router.post("/registrations/{registration_id}/append", response_model=SuccessResponse)
async def append_registration_endpoint(
    registration_id: str, coordinator: SyncCoordinator = Depends(get_coordinator)
):
    """Ensure spreadsheet and tab exist, then push the registration."""
    await coordinator.append_registration(registration_id)
    return SuccessResponse(message="Registration synced")


@router.get("/inflight", response_model=InFlightStats)
async def inflight_stats_endpoint(coordinator: SyncCoordinator = Depends(get_coordinator)):
    """Operation keys currently in flight, with keys older than the stale threshold."""
    return coordinator.inflight.get_stats(stale_after_seconds=settings.INFLIGHT_STALE_AFTER_SECONDS)
