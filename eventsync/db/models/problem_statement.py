"""ProblemStatement model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from eventsync.db.base import Base
from eventsync.core.utils import new_id


class ProblemStatement(Base):
    __tablename__ = "problem_statements"

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    sheet_tab_name = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    # Relationships
    event = relationship("Event", back_populates="problem_statements")
    registrations = relationship("Registration", back_populates="problem_statement", cascade="all, delete-orphan")

    __table_args__ = (Index("idx_problem_statements_event", "event_id"),)
