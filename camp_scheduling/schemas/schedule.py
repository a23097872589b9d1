# camp_scheduling/schemas/schedule.py
from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import BaseModel, Field


class CampSchedule(BaseModel):
    id: str
    camp_id: str
    day_of_week: int
    start_time: time
    end_time: time
    model_config = {"from_attributes": True}


class CampScheduleCreate(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: time
    end_time: time


class ScheduleException(BaseModel):
    id: str
    camp_id: str
    original_schedule_id: Optional[str] = None
    exception_date: date
    day_of_week: int
    start_time: time
    end_time: time
    status: str
    reason: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = {"from_attributes": True}


class ScheduleExceptionCreate(BaseModel):
    exception_date: date
    start_time: time
    end_time: time
    original_schedule_id: Optional[str] = None
    status: Literal["active", "cancelled"] = "active"
    reason: Optional[str] = None


class ScheduleExceptionUpdate(BaseModel):
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: Optional[Literal["active", "cancelled"]] = None
    reason: Optional[str] = None


class EffectiveWindow(BaseModel):
    camp_id: str
    window_date: date
    day_of_week: int
    start_time: time
    end_time: time
    source: Literal["exception", "schedule"]
    exception_id: Optional[str] = None
    model_config = {"from_attributes": True}
