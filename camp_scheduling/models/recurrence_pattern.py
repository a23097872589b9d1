# camp_scheduling/models/recurrence_pattern.py
import uuid

from sqlalchemy import Column, String, Date, Time, DateTime, ForeignKey, JSON, func

from camp_scheduling.db.base_class import Base


class RecurrencePattern(Base):
    """Declarative generator of camp sessions over a date range."""
    __tablename__ = "recurrence_patterns"

    id = Column(String, primary_key=True, default=lambda: f"rpat_{uuid.uuid4().hex[:12]}")
    camp_id = Column(String, ForeignKey("camps.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    pattern_type = Column(String(20), nullable=False)  # all_days, weekdays, weekends, specific_days, custom
    repeat_type = Column(String(20), nullable=False)  # daily, weekly, biweekly, custom
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    days_of_week = Column(JSON, nullable=True)  # list of 0-6, used by specific_days
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    last_expanded_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
