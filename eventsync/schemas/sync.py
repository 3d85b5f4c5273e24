"""Spreadsheet sync schemas."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class SpreadsheetResponse(BaseModel):
    event_id: str
    spreadsheet_id: str


class SyncResult(BaseModel):
    """Gateway reply passed back to the admin UI."""
    success: bool = True
    status: Optional[int] = None
    message: Optional[str] = None
    details: Dict[str, Any] = {}


class InFlightEntry(BaseModel):
    age_seconds: float
    started_at: str


class InFlightStats(BaseModel):
    size: int
    acquired: int
    rejected: int
    entries: Dict[str, InFlightEntry]
    stale: List[str]
