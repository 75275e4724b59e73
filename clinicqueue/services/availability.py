"""
Availability engine for provider appointment slots.

Pure scheduling logic: the engine holds no state and reads everything it
needs from a schedule store and an appointment store on every call. Store
errors propagate to the caller unchanged.

Algorithm for a single date:
1. Resolve the schedule windows (dated exceptions replace weekly rules)
2. Fetch the provider's non-cancelled appointments for that day
3. Walk each window in fixed steps, keeping starts that are free and not past
4. Return the unique starts in ascending order
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional, Sequence
import logging

logger = logging.getLogger(__name__)

DEFAULT_SLOT_MINUTES = 30

# Windows never cross midnight, so nothing longer than a day can fit one
MAX_SLOT_MINUTES = 24 * 60


@dataclass(frozen=True)
class ScheduleRule:
    """
    A provider availability rule for one weekday.

    Invariant: start_time must be before end_time.
    """
    provider_id: int
    day_of_week: int
    start_time: time
    end_time: time
    is_available: bool = True
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError(f"Start time {self.start_time} must be before end time {self.end_time}")

    @property
    def is_recurring(self) -> bool:
        return self.effective_date is None and self.expiration_date is None

    @property
    def is_exception(self) -> bool:
        return self.effective_date is not None

    def covers(self, on_date: date) -> bool:
        """Check if a dated exception applies to the given date."""
        if self.effective_date is None or self.effective_date > on_date:
            return False
        return self.expiration_date is None or self.expiration_date >= on_date

    def window_on(self, on_date: date) -> "TimeWindow":
        return TimeWindow(
            start=datetime.combine(on_date, self.start_time),
            end=datetime.combine(on_date, self.end_time),
        )


@dataclass(frozen=True)
class TimeWindow:
    """A half-open [start, end) range of time."""
    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and start < self.end

    def contains(self, start: datetime, end: datetime) -> bool:
        return start >= self.start and end <= self.end

    def fits(self, start: datetime, length: timedelta) -> bool:
        """Like contains, without computing an end that may overflow."""
        return self.start <= start <= self.end and length <= self.end - start


@dataclass(frozen=True)
class AppointmentInterval(TimeWindow):
    """The time a non-cancelled appointment occupies for its provider."""
    provider_id: int = 0

    @classmethod
    def from_booking(cls, provider_id: int, start: datetime, duration_minutes: int) -> "AppointmentInterval":
        return cls(
            start=start,
            end=start + timedelta(minutes=duration_minutes),
            provider_id=provider_id,
        )


def _normalize_minutes(minutes: int) -> int:
    return minutes if minutes > 0 else DEFAULT_SLOT_MINUTES


def _as_date(value) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


class AvailabilityEngine:
    """
    Computes bookable slots and validates proposed bookings.

    The schedule store must provide fetch_schedules(provider_id, day_of_week)
    and the appointment store fetch_appointments(provider_id, start, end)
    plus fetch_overlapping(provider_id, start, end).
    """

    def __init__(
        self,
        schedule_store,
        appointment_store,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.schedule_store = schedule_store
        self.appointment_store = appointment_store
        self.clock = clock

    def resolve_effective_schedules(self, provider_id: int, on_date) -> List[ScheduleRule]:
        """
        Return the available rules that apply to a date.

        Any dated exception covering the date replaces the recurring rules
        for that weekday entirely, even when none of the exceptions is
        available. Blocked exceptions contribute no window.
        """
        on_date = _as_date(on_date)
        rules = self.schedule_store.fetch_schedules(provider_id, on_date.weekday())

        exceptions = [rule for rule in rules if rule.is_exception and rule.covers(on_date)]
        if exceptions:
            logger.debug(
                f"Provider {provider_id}: {len(exceptions)} dated exception(s) apply on {on_date}"
            )
            return [rule for rule in exceptions if rule.is_available]

        return [rule for rule in rules if rule.is_recurring and rule.is_available]

    def get_available_slots(
        self,
        provider_id: int,
        on_date,
        slot_minutes: int = DEFAULT_SLOT_MINUTES
    ) -> List[datetime]:
        """
        List the bookable slot starts for a provider on a date.

        Args:
            provider_id: Provider to compute availability for
            on_date: Calendar day; any time-of-day component is discarded
            slot_minutes: Slot length, non-positive values fall back to 30

        Returns:
            Unique slot start datetimes in ascending order
        """
        slot_minutes = _normalize_minutes(slot_minutes)
        on_date = _as_date(on_date)
        if slot_minutes > MAX_SLOT_MINUTES:
            return []

        schedules = self.resolve_effective_schedules(provider_id, on_date)
        if not schedules:
            return []

        day_start = datetime.combine(on_date, time.min)
        existing = self.appointment_store.fetch_appointments(
            provider_id, day_start, day_start + timedelta(days=1)
        )
        now = self.clock()
        step = timedelta(minutes=slot_minutes)

        slots = set()
        for schedule in schedules:
            slots.update(self._walk_window(schedule.window_on(on_date), step, existing, now))

        return sorted(slots)

    def is_slot_available(
        self,
        provider_id: int,
        start: datetime,
        duration_minutes: int = DEFAULT_SLOT_MINUTES
    ) -> bool:
        """Check whether [start, start + duration) can be booked."""
        duration_minutes = _normalize_minutes(duration_minutes)
        if duration_minutes > MAX_SLOT_MINUTES:
            return False

        length = timedelta(minutes=duration_minutes)
        on_date = start.date()

        windows = [
            schedule.window_on(on_date)
            for schedule in self.resolve_effective_schedules(provider_id, on_date)
        ]
        if not any(window.fits(start, length) for window in windows):
            return False

        end = start + length
        existing = self.appointment_store.fetch_overlapping(provider_id, start, end)
        return not _overlaps_any(start, end, existing)

    def _walk_window(
        self,
        window: TimeWindow,
        step: timedelta,
        existing: Sequence[AppointmentInterval],
        now: datetime
    ) -> List[datetime]:
        accepted: List[datetime] = []
        cursor = window.start

        while step <= window.end - cursor:
            candidate_end = cursor + step
            if cursor >= now and not _overlaps_any(cursor, candidate_end, existing):
                accepted.append(cursor)
            cursor = candidate_end

        return accepted


def _overlaps_any(start: datetime, end: datetime, intervals: Sequence[TimeWindow]) -> bool:
    return any(interval.overlaps(start, end) for interval in intervals)
