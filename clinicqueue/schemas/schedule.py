from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date, time

class ScheduleCreate(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0=Mon, 1=Tue, ..., 6=Sun")
    start_time: time
    end_time: time
    is_available: bool = True
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None

    @model_validator(mode="after")
    def check_bounds(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        if self.expiration_date is not None:
            if self.effective_date is None:
                raise ValueError("expiration_date requires an effective_date")
            if self.expiration_date < self.effective_date:
                raise ValueError("expiration_date must not be before effective_date")
        return self

class ScheduleResponse(ScheduleCreate):
    id: int
    provider_id: int

    class Config:
        from_attributes = True
