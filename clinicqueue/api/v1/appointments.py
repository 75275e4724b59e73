from fastapi import APIRouter, Depends, status
from datetime import date
from typing import List, Optional

from ...api.deps import get_appointment_service
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import AppointmentCreate, AppointmentCancel, AppointmentResponse

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    appointment_data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service)
):
    """Book an appointment in a free slot."""
    appointment = service.book_appointment(appointment_data)
    return AppointmentResponse.model_validate(appointment)

@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    provider_id: int,
    date: date,
    service: AppointmentService = Depends(get_appointment_service)
):
    """List a provider's appointments for a day."""
    appointments = service.list_for_provider(provider_id, date)
    return [AppointmentResponse.model_validate(appointment) for appointment in appointments]

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service)
):
    return AppointmentResponse.model_validate(service.get_appointment(appointment_id))

@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    cancel_data: Optional[AppointmentCancel] = None,
    service: AppointmentService = Depends(get_appointment_service)
):
    """Cancel an appointment."""
    reason = cancel_data.reason if cancel_data else None
    return AppointmentResponse.model_validate(service.cancel_appointment(appointment_id, reason))

@router.post("/{appointment_id}/confirm", response_model=AppointmentResponse)
async def confirm_appointment(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service)
):
    return AppointmentResponse.model_validate(service.confirm_appointment(appointment_id))

@router.post("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service)
):
    return AppointmentResponse.model_validate(service.complete_appointment(appointment_id))
