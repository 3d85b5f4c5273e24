"""Pydantic schemas for request/response validation."""
from eventsync.schemas.auth import AdminLoginRequest
from eventsync.schemas.common import SuccessResponse, ErrorResponse
from eventsync.schemas.event import EventCreate, EventUpdate, EventResponse, EventDetail, ProblemSummary
from eventsync.schemas.problem import ProblemCreate, ProblemUpdate, ProblemResponse
from eventsync.schemas.registration import (
    RegistrationSubmit,
    RegistrationUpdate,
    RegistrationResponse,
    RegistrationSubmitResponse,
    AttendanceLinkResponse,
)
from eventsync.schemas.attendance import (
    AttendanceToggleRequest,
    AttendanceToggleResponse,
    MemberAttendance,
    TeamAttendance,
    TeamAttendanceSummary,
    EventAttendanceOverview,
)
from eventsync.schemas.sync import SpreadsheetResponse, SyncResult, InFlightStats

__all__ = [
    "AdminLoginRequest",
    "SuccessResponse",
    "ErrorResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventDetail",
    "ProblemSummary",
    "ProblemCreate",
    "ProblemUpdate",
    "ProblemResponse",
    "RegistrationSubmit",
    "RegistrationUpdate",
    "RegistrationResponse",
    "RegistrationSubmitResponse",
    "AttendanceLinkResponse",
    "AttendanceToggleRequest",
    "AttendanceToggleResponse",
    "MemberAttendance",
    "TeamAttendance",
    "TeamAttendanceSummary",
    "EventAttendanceOverview",
    "SpreadsheetResponse",
    "SyncResult",
    "InFlightStats",
]
