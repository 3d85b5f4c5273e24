"""General utility functions."""
import secrets
import uuid
from datetime import datetime, timezone
from typing import Optional

from eventsync.core.constants import REG_CODE_ALPHABET, REG_CODE_LENGTH


def generate_reg_code(length: int = REG_CODE_LENGTH) -> str:
    """Generate a random lowercase alphanumeric registration code."""
    return "".join(secrets.choice(REG_CODE_ALPHABET) for _ in range(length))


def new_id() -> str:
    """Primary key for new rows."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_registration_open(is_active: bool, deadline: Optional[datetime]) -> bool:
    """
    Check whether an event still accepts registrations and edits.

    Args:
        is_active: The event's active flag
        deadline: Optional registration deadline (naive values are treated as UTC)

    Returns:
        bool: False if the event is inactive or the deadline has passed
    """
    if not is_active:
        return False
    if deadline is None:
        return True
    return utcnow() <= to_utc(deadline)
