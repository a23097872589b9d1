# camp_scheduling/models/camp_schedule.py
import uuid

from sqlalchemy import Column, String, Integer, Time, ForeignKey, CheckConstraint

from camp_scheduling.db.base_class import Base


class CampSchedule(Base):
    """Base weekly schedule entry: one day of week -> start/end time."""
    __tablename__ = "camp_schedules"

    id = Column(String, primary_key=True, default=lambda: f"csch_{uuid.uuid4().hex[:12]}")
    camp_id = Column(String, ForeignKey("camps.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday .. 6=Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="check_schedule_day_of_week"),
    )
