"""Database package."""
from eventsync.db.session import engine, SessionLocal, get_db, get_db_context
from eventsync.db.base import Base
from eventsync.db.changes import ChangeEvent, ChangeFeed, change_feed

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "Base",
    "ChangeEvent",
    "ChangeFeed",
    "change_feed",
]
