# camp_scheduling/schemas/recurrence.py
from datetime import date, datetime, time
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class RecurrencePattern(BaseModel):
    id: str
    camp_id: str
    name: str
    pattern_type: str
    repeat_type: str
    start_date: date
    end_date: date
    days_of_week: Optional[List[int]] = None
    start_time: time
    end_time: time
    last_expanded_at: Optional[datetime] = None
    model_config = {"from_attributes": True}


class RecurrencePatternCreate(BaseModel):
    name: str = Field(..., json_schema_extra={"example": "Monday and Wednesday afternoons"})
    pattern_type: Literal["all_days", "weekdays", "weekends", "specific_days", "custom"]
    repeat_type: Literal["daily", "weekly", "biweekly", "custom"] = "daily"
    start_date: date
    end_date: date
    days_of_week: Optional[List[int]] = None
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_days_of_week(self):
        for day in self.days_of_week or []:
            if not 0 <= day <= 6:
                raise ValueError("days_of_week values must be between 0 (Sunday) and 6 (Saturday)")
        return self
