# camp_scheduling/models/camp_session.py
import uuid

from sqlalchemy import Column, String, Date, Time, Text, DateTime, ForeignKey, UniqueConstraint, func

from camp_scheduling.db.base_class import Base


class CampSession(Base):
    """One concrete camp occurrence, usually produced by pattern expansion."""
    __tablename__ = "camp_sessions"

    id = Column(String, primary_key=True, default=lambda: f"csess_{uuid.uuid4().hex[:12]}")
    camp_id = Column(String, ForeignKey("camps.id", ondelete="CASCADE"), nullable=False, index=True)
    session_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(20), nullable=False, server_default="active")  # active, cancelled, rescheduled
    notes = Column(Text, nullable=True)
    recurrence_group_id = Column(
        String, ForeignKey("recurrence_patterns.id", ondelete="SET NULL"), nullable=True, index=True
    )
    rescheduled_date = Column(Date, nullable=True)
    rescheduled_start_time = Column(Time, nullable=True)
    rescheduled_end_time = Column(Time, nullable=True)
    rescheduled_status = Column(String(20), nullable=True)  # confirmed, tbd
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        # Re-expanding a pattern must not duplicate its occurrences
        UniqueConstraint(
            "recurrence_group_id", "session_date", "start_time",
            name="uq_camp_session_occurrence",
        ),
    )
