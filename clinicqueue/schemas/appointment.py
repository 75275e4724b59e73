from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from ..models.appointment import AppointmentStatus
from ..services.availability import MAX_SLOT_MINUTES

def to_local_naive(value: datetime) -> datetime:
    """Schedules are stored in clinic-local wall time without a timezone."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value

class AppointmentCreate(BaseModel):
    patient_id: int
    provider_id: int
    scheduled_at: datetime
    duration_minutes: int = Field(30, le=MAX_SLOT_MINUTES, description="Non-positive values fall back to the default length")
    appointment_type: str = Field("checkup", max_length=50)
    reason: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("scheduled_at")
    @classmethod
    def strip_timezone(cls, value: datetime) -> datetime:
        return to_local_naive(value)

class AppointmentCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=255)

class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    provider_id: int
    scheduled_at: datetime
    duration_minutes: int
    appointment_type: str
    status: AppointmentStatus
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_reason: Optional[str] = None

    class Config:
        from_attributes = True
