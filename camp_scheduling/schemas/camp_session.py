# camp_scheduling/schemas/camp_session.py
from datetime import date, time
from typing import Literal, Optional

from pydantic import BaseModel


class CampSession(BaseModel):
    id: str
    camp_id: str
    session_date: date
    start_time: time
    end_time: time
    status: str
    notes: Optional[str] = None
    recurrence_group_id: Optional[str] = None
    rescheduled_date: Optional[date] = None
    rescheduled_start_time: Optional[time] = None
    rescheduled_end_time: Optional[time] = None
    rescheduled_status: Optional[str] = None
    model_config = {"from_attributes": True}


class CampSessionReschedule(BaseModel):
    rescheduled_date: Optional[date] = None
    rescheduled_start_time: Optional[time] = None
    rescheduled_end_time: Optional[time] = None
    rescheduled_status: Literal["confirmed", "tbd"] = "confirmed"
    notes: Optional[str] = None


class CampSessionCancel(BaseModel):
    notes: Optional[str] = None
