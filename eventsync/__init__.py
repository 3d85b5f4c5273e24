"""EventSync: event registration and attendance with spreadsheet sync."""
