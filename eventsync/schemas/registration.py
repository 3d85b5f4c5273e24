"""Registration schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from eventsync.core.sanitization import sanitize_reg_code


class RegistrationSubmit(BaseModel):
    problem_statement_id: str = Field(..., min_length=1, max_length=36)
    team_name: str = Field(..., min_length=1, max_length=200)
    college_name: str = Field("", max_length=200)
    contact_number: str = Field("", max_length=32)
    email: str = Field("", max_length=254)
    team_size: Optional[int] = Field(None, ge=1)
    team_members: List[str] = Field(..., min_length=1)
    reg_code: Optional[str] = Field(None, max_length=64)  # Edit an existing registration

    @field_validator('reg_code')
    @classmethod
    def sanitize_reg_code_field(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v.strip():
            return sanitize_reg_code(v)
        return None


class RegistrationUpdate(BaseModel):
    """Fields a team may change with its registration code."""
    team_name: Optional[str] = Field(None, min_length=1, max_length=200)
    college_name: Optional[str] = Field(None, max_length=200)
    contact_number: Optional[str] = Field(None, max_length=32)
    email: Optional[str] = Field(None, max_length=254)
    team_size: Optional[int] = Field(None, ge=1)


class RegistrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    problem_statement_id: str
    team_name: str
    college_name: str
    contact_number: str
    email: str
    team_size: int
    team_members: List[str]
    reg_code: str
    is_locked: bool
    attendance_update_count: int
    created_at: datetime
    updated_at: datetime


class RegistrationSubmitResponse(BaseModel):
    registration: RegistrationResponse
    attendance_url: str


class AttendanceLinkResponse(BaseModel):
    reg_code: str
    attendance_url: str
