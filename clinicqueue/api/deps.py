from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..services.availability import AvailabilityEngine
from ..services.stores import ScheduleStore, AppointmentStore
from ..services.appointment_service import AppointmentService

def get_availability_engine(db: Session = Depends(get_db)) -> AvailabilityEngine:
    """Build an availability engine over the request's database session."""
    return AvailabilityEngine(ScheduleStore(db), AppointmentStore(db))

def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)
