from .attendance import (
    get_event_attendance_overview,
    get_team_attendance,
    get_team_attendance_url,
    toggle_attendance,
)
from .events import (
    create_event,
    delete_event,
    event_summary,
    get_event,
    is_event_open,
    list_events,
    update_event,
)
from .problems import (
    create_problem,
    delete_problem,
    get_problem,
    list_problems,
    update_problem,
)
from .registrations import (
    clean_registration_updates,
    get_registration,
    get_registration_by_code,
    list_registrations,
    submit_registration,
    toggle_lock,
)
from .sheets_gateway import SheetResponse, SheetsGateway
from .sync import SyncCoordinator

__all__ = [
    # attendance
    "get_event_attendance_overview",
    "get_team_attendance",
    "get_team_attendance_url",
    "toggle_attendance",
    # events
    "create_event",
    "delete_event",
    "event_summary",
    "get_event",
    "is_event_open",
    "list_events",
    "update_event",
    # problems
    "create_problem",
    "delete_problem",
    "get_problem",
    "list_problems",
    "update_problem",
    # registrations
    "clean_registration_updates",
    "get_registration",
    "get_registration_by_code",
    "list_registrations",
    "submit_registration",
    "toggle_lock",
    # sync
    "SheetResponse",
    "SheetsGateway",
    "SyncCoordinator",
]
