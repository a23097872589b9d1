# camp_scheduling/schemas/booking.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SlotBooking(BaseModel):
    id: str
    slot_id: Optional[str] = None
    registration_id: Optional[str] = None
    child_id: str
    parent_id: str
    status: str
    booking_date: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancel_reason: Optional[str] = None
    rescheduled_from_id: Optional[str] = None
    notes: Optional[str] = None
    notification_sent: bool = False
    reminder_sent: bool = False
    feedback_sent: bool = False
    model_config = {"from_attributes": True}


class SlotBookingCreate(BaseModel):
    child_id: str
    registration_id: Optional[str] = None
    notes: Optional[str] = None


class SlotBookingCancel(BaseModel):
    cancel_reason: Optional[str] = None


class SlotBookingReschedule(BaseModel):
    new_slot_id: str
    notes: Optional[str] = None
