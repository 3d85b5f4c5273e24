"""Spreadsheet sync coordination.

SyncCoordinator mirrors events, problem statements and registrations into the
spreadsheet gateway. Each public operation runs under an in-flight key built
from its own prefix and target id; a second call of the same kind on the same
target is rejected (ConflictError) or, for tab creation, silently skipped.
Same-key calls never queue.

Sync failures never undo the database write that preceded them. Callers that
write and then sync should catch EventSyncError from the sync step and log it.
"""
import asyncio
from typing import Any, Callable, Dict, List, Optional, Set

from sqlalchemy.orm import Session

from eventsync.core import constants
from eventsync.core.exceptions import ConflictError, EventSyncError, NotFoundError, RemoteError
from eventsync.core.inflight import InFlightRegistry, operation_key
from eventsync.core.logging_config import get_logger
from eventsync.core.utils import is_registration_open, utcnow
from eventsync.db.changes import INSERT, UPDATE, ChangeEvent, ChangeFeed
from eventsync.db.models import Event, ProblemStatement, Registration
from eventsync.services.registrations import clean_registration_updates
from eventsync.services.sheets_gateway import SheetResponse, SheetsGateway

logger = get_logger(__name__)


class SyncCoordinator:
    """
    Mirrors row-store state into the spreadsheet gateway.

    Construction has no side effects. Call start() from a running event loop
    to subscribe to the change feed, and stop() to unsubscribe.

    Args:
        session_factory: Callable returning a new Session (e.g. a sessionmaker)
        gateway: Spreadsheet gateway client
        feed: Change feed to subscribe to on start()
        sync_on_update: Also sync registrations on UPDATE notifications
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        gateway: SheetsGateway,
        feed: Optional[ChangeFeed] = None,
        sync_on_update: bool = True,
        inflight: Optional[InFlightRegistry] = None,
    ):
        self._session_factory = session_factory
        self._gateway = gateway
        self._feed = feed
        self._sync_on_update = sync_on_update
        self.inflight = inflight or InFlightRegistry()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribers: List[Callable[[], None]] = []
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return bool(self._unsubscribers)

    def start(self) -> None:
        """Subscribe to inserts (and registration updates) on the change feed.

        Must be called from the event loop that will run the triggered syncs.
        """
        if self.started:
            return
        if self._feed is None:
            raise RuntimeError("SyncCoordinator has no change feed to subscribe to")

        self._loop = asyncio.get_running_loop()
        self._unsubscribers = [
            self._feed.subscribe("events", self._on_event_change),
            self._feed.subscribe("problem_statements", self._on_problem_change),
            self._feed.subscribe("registrations", self._on_registration_change),
        ]
        logger.info("sync_coordinator_started", sync_on_update=self._sync_on_update)

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        logger.info("sync_coordinator_stopped", pending=len(self._tasks))

    async def wait_idle(self) -> None:
        """Wait until every automatically triggered sync has finished."""
        # Let callbacks handed over by call_soon_threadsafe create their tasks
        await asyncio.sleep(0)
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
            await asyncio.sleep(0)

    # ------------------------------------------------------------------
    # Change feed handlers
    # ------------------------------------------------------------------

    def _on_event_change(self, change: ChangeEvent) -> None:
        if change.event_type == INSERT:
            self._schedule("ensureEvent", self.ensure_event_spreadsheet, change.new["id"])

    def _on_problem_change(self, change: ChangeEvent) -> None:
        if change.event_type == INSERT:
            self._schedule(
                "ensureProblem", self.ensure_problem_tab, change.new["event_id"], change.new["id"]
            )

    def _on_registration_change(self, change: ChangeEvent) -> None:
        if change.event_type == INSERT or (change.event_type == UPDATE and self._sync_on_update):
            self._schedule("syncReg", self.sync_registration, change.new["id"])

    def _schedule(self, label: str, func, *args) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.warning("auto_sync_dropped", operation=label, args=args)
            return
        # Commits may happen on worker threads; hand over to the loop thread
        loop.call_soon_threadsafe(self._spawn, label, func, args)

    def _spawn(self, label: str, func, args) -> None:
        task = self._loop.create_task(self.run_logged(label, func, *args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def run_logged(self, label: str, func, *args) -> None:
        """Run an operation, logging failures instead of raising them."""
        try:
            await func(*args)
        except ConflictError as exc:
            # Someone else is already handling this entity
            logger.info("auto_sync_already_running", operation=label, key=exc.key)
        except EventSyncError as exc:
            logger.warning("auto_sync_failed", operation=label, args=args, error=str(exc))
        except Exception:
            logger.exception("auto_sync_crashed", operation=label, args=args)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _post(self, action: str, data: Dict[str, Any]) -> SheetResponse:
        logger.info("sync_started", action=action)
        try:
            response = await self._gateway.post(action, data)
        except RemoteError as exc:
            logger.error("sync_failed", action=action, error=str(exc))
            raise
        logger.info("sync_completed", action=action)
        return response

    def _record_sheet_id(self, event_id: str, spreadsheet_id: str) -> str:
        """Store the spreadsheet id unless one is already set; return the winner."""
        with self._session_factory() as db:
            updated = db.query(Event).filter(
                Event.id == event_id,
                Event.sheet_id.is_(None),
            ).update({Event.sheet_id: spreadsheet_id}, synchronize_session=False)
            db.commit()
            if updated:
                return spreadsheet_id
            stored = db.query(Event.sheet_id).filter(Event.id == event_id).scalar()
            return stored or spreadsheet_id

    def _record_tab_name(self, problem_id: str, tab_name: Optional[str]) -> None:
        if not tab_name:
            return
        with self._session_factory() as db:
            db.query(ProblemStatement).filter(
                ProblemStatement.id == problem_id,
                ProblemStatement.sheet_tab_name.is_(None),
            ).update({ProblemStatement.sheet_tab_name: tab_name}, synchronize_session=False)
            db.commit()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def ensure_event_spreadsheet(self, event_id: str) -> str:
        """
        Make sure the event has a spreadsheet and return its id.

        An existing sheet_id is returned without a gateway call.

        Raises:
            ConflictError: If this event is already being ensured
            NotFoundError: If the event does not exist
            RemoteError: If the gateway fails or returns no spreadsheet id
        """
        key = operation_key("ensureEvent", event_id)
        with self.inflight.claim(key, "Event sync already in progress"):
            with self._session_factory() as db:
                event = db.query(Event).filter(Event.id == event_id).first()
                if not event:
                    raise NotFoundError("Event not found")
                sheet_id = event.sheet_id

            if sheet_id:
                return sheet_id

            response = await self._post(constants.ACTION_SYNC_EVENT, {"eventId": event_id})
            if not response.spreadsheet_id:
                raise RemoteError("Failed to create spreadsheet", action=constants.ACTION_SYNC_EVENT)

            return self._record_sheet_id(event_id, response.spreadsheet_id)

    async def ensure_problem_tab(self, event_id: str, problem_id: str) -> None:
        """Create or refresh the problem statement's tab. Skips if already running."""
        key = operation_key("ensureProblem", f"{event_id}-{problem_id}")
        if not self.inflight.acquire(key):
            logger.debug("ensure_problem_skipped", key=key)
            return
        try:
            response = await self._post(
                constants.ACTION_SYNC_PROBLEM, {"eventId": event_id, "problemId": problem_id}
            )
            self._record_tab_name(problem_id, response.tab_name)
        finally:
            self.inflight.release(key)

    async def sync_registration(self, registration_id: str) -> SheetResponse:
        """Push one registration to its problem statement's tab."""
        key = operation_key("syncReg", registration_id)
        with self.inflight.claim(key, "Sync already in progress for this registration"):
            return await self._post(
                constants.ACTION_SYNC_REGISTRATION, {"registrationId": registration_id}
            )

    async def upsert_registration(self, registration_id: str) -> None:
        """Same gateway action as sync_registration under its own key prefix."""
        key = operation_key("upsertReg", registration_id)
        with self.inflight.claim(key, "Registration sync already in progress"):
            await self._post(
                constants.ACTION_SYNC_REGISTRATION, {"registrationId": registration_id}
            )

    async def update_registration_by_code(
        self, event_id: str, reg_code: str, updates: Dict[str, Any]
    ) -> bool:
        """
        Update a registration found by (reg_code, event_id), then sync it.

        The database update stands even if the sync step fails.

        Raises:
            ConflictError: If an update for this code is already running
            NotFoundError: If no registration matches; no gateway call is made
            ValueError: If the registration is locked, the event is closed or the
                updates are invalid
            RemoteError: If the gateway sync fails
        """
        key = operation_key("updateByCode", reg_code)
        with self.inflight.claim(key, "Registration update already in progress"):
            with self._session_factory() as db:
                registration = db.query(Registration).filter(
                    Registration.reg_code == reg_code,
                    Registration.event_id == event_id,
                ).first()
                if not registration:
                    raise NotFoundError("Registration not found")
                if registration.is_locked:
                    raise ValueError("Registration is locked")
                event = registration.event
                if not is_registration_open(event.is_active, event.registration_deadline):
                    raise ValueError("Registration is closed for this event")

                cleaned = clean_registration_updates(registration, updates)
                for field, value in cleaned.items():
                    setattr(registration, field, value)
                registration.updated_at = utcnow()
                db.commit()
                registration_id = registration.id

            await self._post(
                constants.ACTION_SYNC_REGISTRATION, {"registrationId": registration_id}
            )
            return True

    async def sync_all_registrations(self, event_id: str) -> SheetResponse:
        """Resync every registration of an event in one gateway call."""
        key = operation_key("syncAll", event_id)
        with self.inflight.claim(key, "Bulk sync already in progress for this event"):
            return await self._post(
                constants.ACTION_SYNC_ALL_REGISTRATIONS, {"eventId": event_id}
            )

    async def bulk_sync_for_event(self, event_id: str) -> SheetResponse:
        """Alias of sync_all_registrations."""
        return await self.sync_all_registrations(event_id)

    async def append_registration(self, registration_id: str) -> None:
        """
        Ensure spreadsheet and tab exist, then push the registration.

        Steps run sequentially: spreadsheet, tab, registration. The first
        failure propagates. Only this operation's own key is held; the nested
        ensure calls claim their own keys.
        """
        key = operation_key("appendReg", registration_id)
        with self.inflight.claim(key, "Sync already in progress for this registration"):
            with self._session_factory() as db:
                row = db.query(Registration, Event, ProblemStatement).join(
                    Event, Registration.event_id == Event.id
                ).join(
                    ProblemStatement, Registration.problem_statement_id == ProblemStatement.id
                ).filter(Registration.id == registration_id).first()
                if not row:
                    raise NotFoundError("Registration not found")
                registration, _, _ = row
                event_id = registration.event_id
                problem_id = registration.problem_statement_id

            await self.ensure_event_spreadsheet(event_id)
            await self.ensure_problem_tab(event_id, problem_id)
            await self._post(
                constants.ACTION_SYNC_REGISTRATION, {"registrationId": registration_id}
            )

    async def bulk_sync(self, events: List[Dict[str, Any]]) -> SheetResponse:
        """Sync the given events in one call. Only one bulk sync runs process-wide."""
        key = operation_key("bulkSync")
        with self.inflight.claim(key, "Bulk sync already in progress"):
            logger.info("bulk_sync_started", events=len(events))
            try:
                return await self._gateway.bulk_sync(events)
            except RemoteError as exc:
                logger.error("sync_failed", action=constants.ACTION_BULK_SYNC, error=str(exc))
                raise

    async def add_problem_statement(self, event_id: str, problem_id: str, title: str) -> None:
        """Ensure the event spreadsheet, then add a tab named after the title.

        Skips silently if the same (event, problem) pair is already running.
        """
        key = operation_key("addProblem", f"{event_id}:{problem_id}")
        if not self.inflight.acquire(key):
            logger.debug("add_problem_skipped", key=key)
            return
        try:
            sheet_id = await self.ensure_event_spreadsheet(event_id)
            response = await self._post(
                constants.ACTION_ADD_PROBLEM_STATEMENT,
                {"spreadsheetId": sheet_id, "problemStatement": {"title": title}},
            )
            self._record_tab_name(problem_id, response.tab_name)
        finally:
            self.inflight.release(key)
