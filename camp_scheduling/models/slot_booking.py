# camp_scheduling/models/slot_booking.py
"""
Slot booking model: one seat claim against an availability slot.

Bookings are never deleted; cancellation flips the status and keeps the row
as history. A child holds at most one confirmed booking per slot.
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, func, text
from sqlalchemy.orm import relationship

from camp_scheduling.db.base_class import Base


class SlotBooking(Base):
    __tablename__ = "slot_bookings"

    id = Column(String, primary_key=True, default=lambda: f"bkg_{uuid.uuid4().hex[:12]}")
    # Nulled when a slot without active bookings is deleted
    slot_id = Column(
        String, ForeignKey("availability_slots.id", ondelete="SET NULL"), nullable=True, index=True
    )
    registration_id = Column(String, nullable=True)
    child_id = Column(String, nullable=False, index=True)
    parent_id = Column(String, nullable=False, index=True)
    status = Column(String(20), nullable=False, server_default="confirmed")  # confirmed, cancelled
    booking_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancel_reason = Column(Text, nullable=True)
    rescheduled_from_id = Column(
        String, ForeignKey("slot_bookings.id", ondelete="SET NULL"), nullable=True
    )
    notes = Column(Text, nullable=True)

    # Written by the messaging service
    notification_sent = Column(Boolean, nullable=False, default=False)
    reminder_sent = Column(Boolean, nullable=False, default=False)
    feedback_sent = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    slot = relationship("AvailabilitySlot", back_populates="bookings")

    __table_args__ = (
        Index(
            "uq_slot_bookings_confirmed_child",
            "slot_id",
            "child_id",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
        Index("ix_slot_bookings_slot_status", "slot_id", "status"),
    )
