from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

class PatientCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=20)
    phone_number: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=255)
    emergency_contact: Optional[str] = Field(None, max_length=100)
    emergency_phone: Optional[str] = Field(None, max_length=20)

class PatientResponse(PatientCreate):
    id: int
    medical_record_number: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
