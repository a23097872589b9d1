# camp_scheduling/schemas/slot.py
from datetime import date, datetime, time
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class AvailabilitySlot(BaseModel):
    id: str
    camp_id: str
    creator_id: str
    slot_date: date
    start_time: time
    end_time: time
    duration_minutes: int
    status: str
    max_bookings: int
    current_bookings: int
    notes: Optional[str] = None
    buffer_before: int = 0
    buffer_after: int = 0
    is_recurring: bool = False
    recurrence_rule: Optional[str] = None
    recurrence_end_date: Optional[date] = None
    parent_slot_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = {"from_attributes": True}


class AvailabilitySlotCreate(BaseModel):
    slot_date: date
    # Accepts "HH:MM"; the window itself is validated by the ledger
    start_time: time = Field(..., json_schema_extra={"example": "09:00"})
    end_time: time = Field(..., json_schema_extra={"example": "10:30"})
    max_bookings: int = Field(1, ge=1)
    notes: Optional[str] = None
    buffer_before: int = Field(0, ge=0)
    buffer_after: int = Field(0, ge=0)


class RecurringSlotCreate(AvailabilitySlotCreate):
    recurrence_rule: Literal["daily", "weekly", "biweekly"]
    recurrence_end_date: date


class AvailabilitySlotUpdate(BaseModel):
    slot_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    max_bookings: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None
    buffer_before: Optional[int] = Field(None, ge=0)
    buffer_after: Optional[int] = Field(None, ge=0)


class SlotLineage(BaseModel):
    slot_id: str
    ancestors: List[AvailabilitySlot] = []
