"""
Row change feed.

Committed ORM changes are published per table as INSERT, UPDATE or DELETE
events carrying a column snapshot of the row. Snapshots are taken at flush
time and delivered only after the surrounding transaction commits; a rollback
discards them.

Bulk statements (``query.update()``, ``delete()`` constructs) bypass the unit
of work and are not published.
"""
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from sqlalchemy import event, inspect

from eventsync.core.logging_config import get_logger

logger = get_logger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"

_PENDING_KEY = "eventsync_pending_changes"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event_type: str
    new: Dict[str, Any] = field(default_factory=dict)


ChangeHandler = Callable[[ChangeEvent], None]


class ChangeFeed:
    """Per-table publish/subscribe for committed row changes."""

    def __init__(self):
        self._handlers: Dict[str, List[ChangeHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, table: str, handler: ChangeHandler) -> Callable[[], None]:
        """Register handler for a table. Returns a function that unsubscribes it."""
        with self._lock:
            self._handlers[table].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers[table]:
                    self._handlers[table].remove(handler)

        return unsubscribe

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._handlers[table])

    def publish(self, change: ChangeEvent) -> None:
        """Deliver change to every handler of its table.

        A failing handler is logged and does not stop delivery to the others.
        """
        with self._lock:
            handlers = list(self._handlers[change.table])

        for handler in handlers:
            try:
                handler(change)
            except Exception:
                logger.exception(
                    "change_handler_failed",
                    table=change.table,
                    event_type=change.event_type,
                )


def _pending(session) -> List[Tuple[str, str, Dict[str, Any]]]:
    return session.info.setdefault(_PENDING_KEY, [])


def _deleted_snapshot(obj) -> Dict[str, Any]:
    """Loaded column values of a deleted row; the row can no longer be refreshed."""
    state = inspect(obj)
    snapshot = {attr.key: state.dict.get(attr.key) for attr in state.mapper.column_attrs}
    for column, value in zip(state.mapper.primary_key, state.identity or ()):
        snapshot[state.mapper.get_property_by_column(column).key] = value
    return snapshot


def install_change_capture(target, feed: ChangeFeed) -> None:
    """
    Publish committed changes of sessions created by ``target`` onto ``feed``.

    Args:
        target: A sessionmaker, Session subclass or Session instance
        feed: The feed receiving the events
    """

    def collect(session, flush_context):
        pending = _pending(session)
        for obj in session.new:
            pending.append((obj.__tablename__, INSERT, obj.to_dict()))
        for obj in session.dirty:
            if session.is_modified(obj, include_collections=False):
                pending.append((obj.__tablename__, UPDATE, obj.to_dict()))
        for obj in session.deleted:
            pending.append((obj.__tablename__, DELETE, _deleted_snapshot(obj)))

    def publish(session):
        pending = session.info.pop(_PENDING_KEY, [])
        for table, event_type, row in pending:
            feed.publish(ChangeEvent(table=table, event_type=event_type, new=row))

    def discard(session, *args):
        session.info.pop(_PENDING_KEY, None)

    event.listen(target, "after_flush", collect)
    event.listen(target, "after_commit", publish)
    event.listen(target, "after_soft_rollback", discard)


# Shared feed for the application's SessionLocal
change_feed = ChangeFeed()
