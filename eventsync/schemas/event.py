"""Event schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from eventsync.core.sanitization import MAX_DESCRIPTION_LENGTH, sanitize_name, sanitize_text


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=MAX_DESCRIPTION_LENGTH)
    max_team_size: int = Field(4, ge=1, le=50)
    is_active: bool = True
    registration_deadline: Optional[datetime] = None

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: str) -> str:
        return sanitize_name(v, "Event name")

    @field_validator('description')
    @classmethod
    def sanitize_description_field(cls, v: str) -> str:
        return sanitize_text(v, max_length=MAX_DESCRIPTION_LENGTH)


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    max_team_size: Optional[int] = Field(None, ge=1, le=50)
    is_active: Optional[bool] = None
    registration_deadline: Optional[datetime] = None


class ProblemSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    sheet_tab_name: Optional[str] = None


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    is_active: bool
    max_team_size: int
    registration_deadline: Optional[datetime] = None
    sheet_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EventDetail(EventResponse):
    problem_statements: List[ProblemSummary] = []
    registration_open: bool = False
