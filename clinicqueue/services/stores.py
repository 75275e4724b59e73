from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import List, Optional

from ..models.schedule import Schedule
from ..models.appointment import Appointment, AppointmentStatus
from .availability import ScheduleRule, AppointmentInterval

class ScheduleStore:
    """Reads schedule rules for the availability engine."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_schedules(self, provider_id: int, day_of_week: int) -> List[ScheduleRule]:
        """Return recurring and dated rules for a provider's weekday."""
        rows = self.db.query(Schedule).filter(
            Schedule.provider_id == provider_id,
            Schedule.day_of_week == day_of_week
        ).order_by(Schedule.start_time, Schedule.id).all()

        return [
            ScheduleRule(
                provider_id=row.provider_id,
                day_of_week=row.day_of_week,
                start_time=row.start_time,
                end_time=row.end_time,
                is_available=row.is_available,
                effective_date=row.effective_date,
                expiration_date=row.expiration_date
            )
            for row in rows
        ]

class AppointmentStore:
    """Reads non-cancelled appointment intervals for the availability engine."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_appointments(
        self,
        provider_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[AppointmentInterval]:
        """
        Return intervals for appointments starting in [start, end).

        Without a range every non-cancelled appointment of the provider
        is returned.
        """
        query = self.db.query(
            Appointment.scheduled_at, Appointment.duration_minutes
        ).filter(
            Appointment.provider_id == provider_id,
            Appointment.status != AppointmentStatus.CANCELLED
        )

        if start is not None:
            query = query.filter(Appointment.scheduled_at >= start)
        if end is not None:
            query = query.filter(Appointment.scheduled_at < end)

        return [
            AppointmentInterval.from_booking(provider_id, scheduled_at, duration_minutes)
            for scheduled_at, duration_minutes in query.order_by(Appointment.scheduled_at).all()
        ]

    def fetch_overlapping(
        self,
        provider_id: int,
        start: datetime,
        end: datetime
    ) -> List[AppointmentInterval]:
        """
        Return intervals overlapping [start, end), whatever day they began.

        The lookback is bounded by the provider's longest live appointment,
        so only rows that could reach into the range are loaded.
        """
        longest = self.db.query(func.max(Appointment.duration_minutes)).filter(
            Appointment.provider_id == provider_id,
            Appointment.status != AppointmentStatus.CANCELLED
        ).scalar()

        if longest is None:
            return []

        candidates = self.fetch_appointments(
            provider_id, start - timedelta(minutes=longest), end
        )
        return [interval for interval in candidates if interval.overlaps(start, end)]
