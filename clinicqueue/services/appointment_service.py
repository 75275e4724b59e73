from sqlalchemy.orm import Session
from datetime import date, datetime, time, timedelta
from typing import Callable, List
import logging

from ..core.config import settings
from ..core.errors import NotFoundError, ConflictError, ValidationFailed
from ..models.appointment import Appointment, AppointmentStatus
from ..models.provider import Provider
from ..schemas.appointment import AppointmentCreate
from .availability import AvailabilityEngine
from .patient_service import PatientService
from .stores import ScheduleStore, AppointmentStore

logger = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.clock = clock
        self.engine = AvailabilityEngine(
            ScheduleStore(db), AppointmentStore(db), clock=clock
        )

    def book_appointment(self, appointment_data: AppointmentCreate) -> Appointment:
        """
        Book an appointment if the provider is free for the whole duration.

        The provider row is locked before the availability check, which
        serializes bookings on databases with row locks. SQLite ignores the
        lock, so the new row is flushed and the overlap query re-run inside
        the same transaction: a competing booking committed after our check
        is seen there, and one written after our flush blocks on our write
        lock until we commit, then sees us in its own re-check.
        """
        duration = appointment_data.duration_minutes
        if duration <= 0:
            duration = settings.DEFAULT_APPOINTMENT_MINUTES

        if appointment_data.scheduled_at < self.clock():
            raise ValidationFailed("Cannot book an appointment in the past")

        PatientService(self.db).get_patient(appointment_data.patient_id)

        provider = self.db.query(Provider).filter(
            Provider.id == appointment_data.provider_id
        ).with_for_update().first()

        if not provider:
            self.db.rollback()
            raise NotFoundError("Provider not found")

        if not provider.is_active:
            self.db.rollback()
            raise ConflictError("Provider is not accepting appointments")

        if not self.engine.is_slot_available(
            provider.id, appointment_data.scheduled_at, duration
        ):
            self.db.rollback()
            logger.info(
                f"Rejected booking for provider {provider.id} at "
                f"{appointment_data.scheduled_at} ({duration} min)"
            )
            raise ConflictError("Requested time is not available")

        appointment = Appointment(
            patient_id=appointment_data.patient_id,
            provider_id=provider.id,
            scheduled_at=appointment_data.scheduled_at,
            duration_minutes=duration,
            appointment_type=appointment_data.appointment_type,
            status=AppointmentStatus.SCHEDULED,
            reason=appointment_data.reason,
            notes=appointment_data.notes
        )

        self.db.add(appointment)
        self.db.flush()

        end = appointment_data.scheduled_at + timedelta(minutes=duration)
        occupants = self.engine.appointment_store.fetch_overlapping(
            provider.id, appointment_data.scheduled_at, end
        )
        if len(occupants) > 1:
            provider_id = provider.id
            self.db.rollback()
            logger.warning(
                f"Concurrent booking for provider {provider_id} at "
                f"{appointment_data.scheduled_at}, rolled back"
            )
            raise ConflictError("Requested time is not available")

        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Booked appointment {appointment.id} for provider {provider.id} "
            f"at {appointment.scheduled_at}"
        )
        return appointment

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()

        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def list_for_provider(self, provider_id: int, on_date: date) -> List[Appointment]:
        """List a provider's appointments, cancelled included, for one day."""
        day_start = datetime.combine(on_date, time.min)

        return self.db.query(Appointment).filter(
            Appointment.provider_id == provider_id,
            Appointment.scheduled_at >= day_start,
            Appointment.scheduled_at < day_start + timedelta(days=1)
        ).order_by(Appointment.scheduled_at).all()

    def cancel_appointment(self, appointment_id: int, reason: str = None) -> Appointment:
        """Cancel an appointment, freeing its slot."""
        appointment = self.get_appointment(appointment_id)

        if appointment.status in (AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED):
            raise ConflictError(f"Appointment is already {appointment.status.value}")

        appointment.status = AppointmentStatus.CANCELLED
        appointment.cancelled_at = datetime.utcnow()
        appointment.cancelled_reason = reason

        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Cancelled appointment {appointment.id}")
        return appointment

    def confirm_appointment(self, appointment_id: int) -> Appointment:
        return self._transition(
            appointment_id,
            AppointmentStatus.CONFIRMED,
            allowed_from=(AppointmentStatus.SCHEDULED,)
        )

    def complete_appointment(self, appointment_id: int) -> Appointment:
        return self._transition(
            appointment_id,
            AppointmentStatus.COMPLETED,
            allowed_from=(AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED)
        )

    def _transition(self, appointment_id: int, target: AppointmentStatus, allowed_from) -> Appointment:
        appointment = self.get_appointment(appointment_id)

        if appointment.status not in allowed_from:
            raise ConflictError(
                f"Cannot mark a {appointment.status.value} appointment as {target.value}"
            )

        appointment.status = target
        self.db.commit()
        self.db.refresh(appointment)

        return appointment
