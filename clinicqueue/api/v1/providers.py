from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import date, datetime, timedelta
from typing import List

from ...core.config import settings
from ...core.database import get_db
from ...api.deps import get_availability_engine
from ...services.availability import AvailabilityEngine, DEFAULT_SLOT_MINUTES, MAX_SLOT_MINUTES
from ...services.provider_service import ProviderService
from ...services.schedule_service import ScheduleService
from ...schemas.provider import ProviderCreate, ProviderResponse
from ...schemas.schedule import ScheduleCreate, ScheduleResponse
from ...schemas.availability import AvailabilityResponse, SlotResponse, SlotCheckResponse
from ...schemas.appointment import to_local_naive

router = APIRouter(prefix="/providers", tags=["Providers"])

def _effective_minutes(minutes: int) -> int:
    return minutes if minutes > 0 else DEFAULT_SLOT_MINUTES

@router.post("", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
async def create_provider(
    provider_data: ProviderCreate,
    db: Session = Depends(get_db)
):
    """Register a provider."""
    provider = ProviderService(db).create_provider(provider_data)
    return ProviderResponse.model_validate(provider)

@router.get("", response_model=List[ProviderResponse])
async def list_providers(
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db)
):
    """List active providers."""
    providers = ProviderService(db).list_providers(skip=skip, limit=limit)
    return [ProviderResponse.model_validate(provider) for provider in providers]

@router.get("/{provider_id}", response_model=ProviderResponse)
async def get_provider(
    provider_id: int,
    db: Session = Depends(get_db)
):
    provider = ProviderService(db).get_provider(provider_id)
    return ProviderResponse.model_validate(provider)

# Schedule rules
@router.post(
    "/{provider_id}/schedules",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_schedule(
    provider_id: int,
    schedule_data: ScheduleCreate,
    db: Session = Depends(get_db)
):
    """Add a recurring weekly rule or a dated exception."""
    schedule = ScheduleService(db).add_schedule(provider_id, schedule_data)
    return ScheduleResponse.model_validate(schedule)

@router.get("/{provider_id}/schedules", response_model=List[ScheduleResponse])
async def list_schedules(
    provider_id: int,
    db: Session = Depends(get_db)
):
    schedules = ScheduleService(db).list_schedules(provider_id)
    return [ScheduleResponse.model_validate(schedule) for schedule in schedules]

@router.delete("/{provider_id}/schedules/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(
    provider_id: int,
    schedule_id: int,
    db: Session = Depends(get_db)
):
    ScheduleService(db).delete_schedule(provider_id, schedule_id)

# Availability
@router.get("/{provider_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    provider_id: int,
    date: date,
    slot_minutes: int = Query(settings.DEFAULT_SLOT_MINUTES, le=MAX_SLOT_MINUTES),
    db: Session = Depends(get_db),
    engine: AvailabilityEngine = Depends(get_availability_engine)
):
    """List bookable slots for a provider on a date."""
    ProviderService(db).get_provider(provider_id)

    slot_minutes = _effective_minutes(slot_minutes)
    starts = engine.get_available_slots(provider_id, date, slot_minutes)

    return AvailabilityResponse(
        provider_id=provider_id,
        date=date,
        slot_minutes=slot_minutes,
        slots=[
            SlotResponse(start=start, end=start + timedelta(minutes=slot_minutes))
            for start in starts
        ]
    )

@router.get("/{provider_id}/availability/check", response_model=SlotCheckResponse)
async def check_availability(
    provider_id: int,
    start: datetime,
    duration_minutes: int = Query(settings.DEFAULT_APPOINTMENT_MINUTES, le=MAX_SLOT_MINUTES),
    db: Session = Depends(get_db),
    engine: AvailabilityEngine = Depends(get_availability_engine)
):
    """Check whether a proposed booking fits the provider's schedule."""
    ProviderService(db).get_provider(provider_id)

    duration_minutes = _effective_minutes(duration_minutes)
    start = to_local_naive(start)

    return SlotCheckResponse(
        provider_id=provider_id,
        start=start,
        end=start + timedelta(minutes=duration_minutes),
        available=engine.is_slot_available(provider_id, start, duration_minutes)
    )
