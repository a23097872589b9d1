# camp_scheduling/models/schedule_exception.py
"""
One-off override of a camp's weekly schedule for a single date.

An active exception replaces the base window for its date; a cancelled one
removes the date from the schedule entirely. A camp has at most one
exception per date.
"""

import uuid

from sqlalchemy import Column, String, Integer, Date, Time, Text, DateTime, ForeignKey, UniqueConstraint, func

from camp_scheduling.db.base_class import Base


class ScheduleException(Base):
    __tablename__ = "schedule_exceptions"

    id = Column(String, primary_key=True, default=lambda: f"sexc_{uuid.uuid4().hex[:12]}")
    camp_id = Column(String, ForeignKey("camps.id", ondelete="CASCADE"), nullable=False, index=True)
    original_schedule_id = Column(
        String, ForeignKey("camp_schedules.id", ondelete="SET NULL"), nullable=True
    )
    exception_date = Column(Date, nullable=False)
    # Cached weekday of exception_date (0=Sunday .. 6=Saturday)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(20), nullable=False, server_default="active")  # active, cancelled
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        # One exception per camp and date; recording another replaces it
        UniqueConstraint("camp_id", "exception_date", name="uq_schedule_exception_camp_date"),
    )
