from sqlalchemy.orm import Session
from typing import List
import logging

from ..core.errors import NotFoundError
from ..models.schedule import Schedule
from ..schemas.schedule import ScheduleCreate
from .provider_service import ProviderService

logger = logging.getLogger(__name__)

class ScheduleService:
    def __init__(self, db: Session):
        self.db = db

    def add_schedule(self, provider_id: int, schedule_data: ScheduleCreate) -> Schedule:
        """Add a recurring rule or a dated exception for a provider."""
        ProviderService(self.db).get_provider(provider_id)

        schedule = Schedule(provider_id=provider_id, **schedule_data.model_dump())

        self.db.add(schedule)
        self.db.commit()
        self.db.refresh(schedule)

        kind = "exception" if schedule.effective_date else "recurring"
        logger.info(f"Added {kind} schedule {schedule.id} for provider {provider_id}")
        return schedule

    def list_schedules(self, provider_id: int) -> List[Schedule]:
        ProviderService(self.db).get_provider(provider_id)

        return self.db.query(Schedule).filter(
            Schedule.provider_id == provider_id
        ).order_by(Schedule.day_of_week, Schedule.start_time, Schedule.id).all()

    def delete_schedule(self, provider_id: int, schedule_id: int) -> None:
        schedule = self.db.query(Schedule).filter(
            Schedule.id == schedule_id,
            Schedule.provider_id == provider_id
        ).first()

        if not schedule:
            raise NotFoundError("Schedule not found")

        self.db.delete(schedule)
        self.db.commit()
