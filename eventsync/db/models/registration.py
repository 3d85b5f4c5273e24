"""Registration model."""
from datetime import datetime, timezone as tz
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from eventsync.db.base import Base
from eventsync.core.utils import new_id


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    problem_statement_id = Column(
        String(36), ForeignKey("problem_statements.id", ondelete="CASCADE"), nullable=False
    )
    team_name = Column(String(200), nullable=False)
    college_name = Column(String(200), nullable=False, default="")
    contact_number = Column(String(32), nullable=False, default="")
    email = Column(String(254), nullable=False, default="")
    team_size = Column(Integer, nullable=False, default=1)
    team_members = Column(JSON, nullable=False, default=list)  # Ordered member names
    reg_code = Column(String(64), unique=True, nullable=False, index=True)
    is_locked = Column(Boolean, nullable=False, default=False)
    attendance_update_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    # Relationships
    event = relationship("Event", back_populates="registrations")
    problem_statement = relationship("ProblemStatement", back_populates="registrations")
    attendance = relationship("Attendance", back_populates="registration", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_registrations_event", "event_id"),
        Index("idx_registrations_problem", "problem_statement_id"),
    )
