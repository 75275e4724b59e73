from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from ..models.provider import ProviderType

class ProviderCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    license_number: str = Field(..., min_length=1, max_length=50)
    specialty: str = Field("", max_length=100)
    provider_type: ProviderType = ProviderType.DOCTOR

class ProviderResponse(ProviderCreate):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
