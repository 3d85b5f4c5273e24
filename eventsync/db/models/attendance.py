"""Attendance model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from eventsync.db.base import Base


class Attendance(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, autoincrement=True)
    registration_id = Column(String(36), ForeignKey("registrations.id", ondelete="CASCADE"), nullable=False)
    member_name = Column(String(120), nullable=False)
    is_present = Column(Boolean, nullable=False, default=False)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Relationships
    registration = relationship("Registration", back_populates="attendance")

    __table_args__ = (
        UniqueConstraint("registration_id", "member_name", name="uq_attendance_member"),
    )
