# camp_scheduling/models/availability_slot.py
"""
Availability slot model: a single bookable window with finite seat capacity.

Features:
- Cached booked-seat counter (`current_bookings`) reconciled from the ledger
- Status derived from the counter (booked iff current_bookings >= max_bookings)
- Optional recurrence lineage through `parent_slot_id`
"""

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import relationship

from camp_scheduling.db.base_class import Base


class AvailabilitySlot(Base):
    __tablename__ = "availability_slots"

    id = Column(String, primary_key=True, default=lambda: f"slot_{uuid.uuid4().hex[:12]}")
    camp_id = Column(String, ForeignKey("camps.id", ondelete="CASCADE"), nullable=False, index=True)
    creator_id = Column(String, nullable=False)
    slot_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, server_default="available")  # available, booked
    max_bookings = Column(Integer, nullable=False, server_default="1")
    current_bookings = Column(Integer, nullable=False, server_default="0")
    notes = Column(Text, nullable=True)

    # Stored only; not enforced against neighbouring slots
    buffer_before = Column(Integer, nullable=False, server_default="0")
    buffer_after = Column(Integer, nullable=False, server_default="0")

    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_rule = Column(String(20), nullable=True)  # daily, weekly, biweekly
    recurrence_end_date = Column(Date, nullable=True)
    parent_slot_id = Column(
        String, ForeignKey("availability_slots.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    bookings = relationship(
        "SlotBooking", back_populates="slot", passive_deletes=True, lazy="select"
    )

    __table_args__ = (
        CheckConstraint("max_bookings >= 1", name="check_slot_capacity_positive"),
        CheckConstraint("current_bookings >= 0", name="check_slot_bookings_positive"),
        CheckConstraint("current_bookings <= max_bookings", name="check_slot_bookings_lte_capacity"),
        CheckConstraint("duration_minutes > 0", name="check_slot_duration_positive"),
        Index("ix_availability_slots_camp_date_start", "camp_id", "slot_date", "start_time"),
    )
