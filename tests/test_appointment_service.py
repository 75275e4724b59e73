"""
Tests for booking through the appointment service.
"""

import pytest
from datetime import datetime, time

from clinicqueue.core.errors import ConflictError, ValidationFailed
from clinicqueue.models import Appointment, AppointmentStatus, Patient, Provider, Schedule
from clinicqueue.schemas.appointment import AppointmentCreate
from clinicqueue.services.appointment_service import AppointmentService
from tests.conftest import TestingSessionLocal

NOW = datetime(2024, 11, 24, 8, 0)


@pytest.fixture
def service(db_session):
    return AppointmentService(db_session, clock=lambda: NOW)


@pytest.fixture
def booking_parties(db_session):
    provider = Provider(first_name="Ada", last_name="Osei", license_number="LIC-1", specialty="Family")
    patient = Patient(first_name="Pat", last_name="Doe", medical_record_number="MRN-20241124-00001")
    db_session.add_all([provider, patient])
    db_session.commit()

    db_session.add(Schedule(
        provider_id=provider.id, day_of_week=0, start_time=time(9, 0), end_time=time(17, 0)
    ))
    db_session.commit()
    return provider, patient


def request_for(provider, patient, when, duration=30):
    return AppointmentCreate(
        patient_id=patient.id,
        provider_id=provider.id,
        scheduled_at=when,
        duration_minutes=duration
    )


class TestAppointmentService:

    def test_book_and_block_overlap(self, service, booking_parties):
        provider, patient = booking_parties

        appointment = service.book_appointment(
            request_for(provider, patient, datetime(2024, 11, 25, 10, 0), duration=60)
        )
        assert appointment.status == AppointmentStatus.SCHEDULED

        with pytest.raises(ConflictError):
            service.book_appointment(request_for(provider, patient, datetime(2024, 11, 25, 10, 30)))

        assert datetime(2024, 11, 25, 10, 30) not in service.engine.get_available_slots(
            provider.id, datetime(2024, 11, 25), 30
        )

    def test_cancelled_booking_frees_time(self, service, booking_parties):
        provider, patient = booking_parties
        when = datetime(2024, 11, 25, 10, 0)

        appointment = service.book_appointment(request_for(provider, patient, when))
        service.cancel_appointment(appointment.id, "Rescheduled")

        rebooked = service.book_appointment(request_for(provider, patient, when))
        assert rebooked.id != appointment.id

    def test_inactive_provider(self, service, booking_parties, db_session):
        provider, patient = booking_parties
        provider.is_active = False
        db_session.commit()

        with pytest.raises(ConflictError):
            service.book_appointment(request_for(provider, patient, datetime(2024, 11, 25, 10, 0)))

    def test_past_booking(self, service, booking_parties):
        provider, patient = booking_parties

        with pytest.raises(ValidationFailed):
            service.book_appointment(request_for(provider, patient, datetime(2024, 11, 18, 10, 0)))

    def test_list_includes_cancelled(self, service, booking_parties):
        provider, patient = booking_parties
        kept = service.book_appointment(request_for(provider, patient, datetime(2024, 11, 25, 9, 0)))
        dropped = service.book_appointment(request_for(provider, patient, datetime(2024, 11, 25, 11, 0)))
        service.cancel_appointment(dropped.id)

        listed = service.list_for_provider(provider.id, datetime(2024, 11, 25).date())

        assert [a.id for a in listed] == [kept.id, dropped.id]
        assert listed[1].status == AppointmentStatus.CANCELLED

    def test_booking_committed_after_check_is_caught(self, service, booking_parties, db_session, monkeypatch):
        """A rival session that books the same slot between our check and our insert wins."""
        provider, patient = booking_parties
        when = datetime(2024, 11, 25, 10, 0)
        request = request_for(provider, patient, when)

        rival_session = TestingSessionLocal()
        rival = AppointmentService(rival_session, clock=lambda: NOW)
        check = service.engine.is_slot_available

        def check_then_let_rival_book(*args, **kwargs):
            result = check(*args, **kwargs)
            rival.book_appointment(request)
            return result

        monkeypatch.setattr(service.engine, "is_slot_available", check_then_let_rival_book)

        try:
            with pytest.raises(ConflictError):
                service.book_appointment(request)
        finally:
            rival_session.close()

        live = db_session.query(Appointment).filter(
            Appointment.provider_id == request.provider_id,
            Appointment.status != AppointmentStatus.CANCELLED
        ).all()
        assert [a.scheduled_at for a in live] == [when]
