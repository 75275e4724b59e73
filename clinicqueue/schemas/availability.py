from pydantic import BaseModel
from typing import List
from datetime import date as Date, datetime

class SlotResponse(BaseModel):
    start: datetime
    end: datetime

class AvailabilityResponse(BaseModel):
    provider_id: int
    date: Date
    slot_minutes: int
    slots: List[SlotResponse]

class SlotCheckResponse(BaseModel):
    provider_id: int
    start: datetime
    end: datetime
    available: bool
