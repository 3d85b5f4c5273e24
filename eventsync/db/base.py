"""Database base class and model imports."""
from sqlalchemy import inspect
from sqlalchemy.orm import declarative_base


class RowMixin:
    """Column snapshot used by the change feed."""

    def to_dict(self) -> dict:
        return {
            attr.key: getattr(self, attr.key)
            for attr in inspect(self).mapper.column_attrs
        }


Base = declarative_base(cls=RowMixin)

# Import all models here for Alembic to detect them
from eventsync.db.models.event import Event  # noqa: F401, E402
from eventsync.db.models.problem_statement import ProblemStatement  # noqa: F401, E402
from eventsync.db.models.registration import Registration  # noqa: F401, E402
from eventsync.db.models.attendance import Attendance  # noqa: F401, E402
