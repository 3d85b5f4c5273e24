"""Database models."""
from eventsync.db.models.event import Event
from eventsync.db.models.problem_statement import ProblemStatement
from eventsync.db.models.registration import Registration
from eventsync.db.models.attendance import Attendance

__all__ = ["Event", "ProblemStatement", "Registration", "Attendance"]
