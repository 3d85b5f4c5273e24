"""Attendance schemas."""
from typing import List, Optional
from pydantic import BaseModel, Field

from eventsync.schemas.registration import RegistrationResponse


class AttendanceToggleRequest(BaseModel):
    member_name: str = Field(..., min_length=1, max_length=120)
    expected_count: int = Field(..., ge=0)


class AttendanceToggleResponse(BaseModel):
    member_name: str
    is_present: bool
    attendance_update_count: int
    remaining_updates: int


class MemberAttendance(BaseModel):
    member_name: str
    is_present: bool


class TeamAttendance(BaseModel):
    registration: RegistrationResponse
    members: List[MemberAttendance]
    attendance_update_count: int
    remaining_updates: int


class TeamAttendanceSummary(BaseModel):
    registration_id: str
    team_name: str
    reg_code: str
    problem_statement_id: str
    attendance_update_count: int
    members: List[MemberAttendance]
    present_count: int


class EventAttendanceOverview(BaseModel):
    event_id: str
    event_name: str
    teams: List[TeamAttendanceSummary]
    total_teams: int
    total_members: int
    total_present: int
    problem_statement_id: Optional[str] = None
