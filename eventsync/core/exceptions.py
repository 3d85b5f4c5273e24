"""Service-layer error types.

Business rule violations that have no dedicated type still raise ValueError,
which the API maps to 400.
"""
from typing import Optional


class EventSyncError(Exception):
    """Base class for errors raised by the sync and attendance services."""


class ConflictError(EventSyncError):
    """An operation with the same in-flight key is already running."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class NotFoundError(EventSyncError):
    """A referenced event, problem statement or registration does not exist."""


class RemoteError(EventSyncError):
    """The spreadsheet gateway failed or returned an error envelope."""

    def __init__(self, message: str, action: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.action = action
        self.status_code = status_code


class LimitExceededError(EventSyncError):
    """The attendance update limit for a registration is exhausted."""

    def __init__(self, message: str, attendance_update_count: Optional[int] = None):
        super().__init__(message)
        self.attendance_update_count = attendance_update_count
