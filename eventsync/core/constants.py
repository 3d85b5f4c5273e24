"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Registration Code Configuration
# Codes are lowercase alphanumeric strings handed to teams as their only credential
REG_CODE_LENGTH = 12
REG_CODE_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"

# Attendance
# A team may toggle member attendance at most this many times in total
ATTENDANCE_UPDATE_LIMIT = 2
ATTENDANCE_PATH_PREFIX = "/attendance/"

# JWT Token Configuration
# Token expiration time in minutes (8 hours)
ACCESS_TOKEN_EXPIRE_MINUTES = 480

# Fields a team may change through update-by-code
REGISTRATION_UPDATABLE_FIELDS = frozenset({
    "team_name",
    "college_name",
    "contact_number",
    "email",
    "team_size",
})

# Spreadsheet gateway actions (names understood by the Apps Script endpoint)
ACTION_SYNC_EVENT = "syncEvent"
ACTION_SYNC_PROBLEM = "syncProblem"
ACTION_SYNC_REGISTRATION = "syncRegistration"
ACTION_SYNC_ALL_REGISTRATIONS = "syncAllRegistrations"
ACTION_BULK_SYNC = "bulkSync"
ACTION_ADD_PROBLEM_STATEMENT = "addProblemStatement"
ACTION_CREATE_EVENT = "createEvent"
ACTION_CREATE_TAB = "createTab"
ACTION_UPSERT_REGISTRATION = "upsertRegistration"
ACTION_APPEND_ROW = "appendRow"
ACTION_UPDATE_ROW = "updateRow"
ACTION_FIND_ROW = "findRow"
ACTION_EXPORT = "exportFromSupabase"

GATEWAY_FALLBACK_ERROR = "Failed to sync with sheet"
