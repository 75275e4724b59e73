from sqlalchemy import Column, Integer, ForeignKey, Boolean, Date, Time, CheckConstraint, Index
from sqlalchemy.orm import relationship

from ..core.database import Base

class Schedule(Base):
    """
    A weekly availability rule for a provider.

    Rules without an effective date repeat every week. Rules with an
    effective date are exceptions that replace the weekly rules for every
    date they cover. day_of_week follows date.weekday(): 0 is Monday.
    """
    __tablename__ = "schedules"
    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedules_day_of_week"),
        CheckConstraint("start_time < end_time", name="ck_schedules_time_order"),
        Index("ix_schedules_provider_day", "provider_id", "day_of_week"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=False)
    
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    
    # Date bounds, both empty for recurring rules
    effective_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)
    
    # Relationships
    provider = relationship("Provider", back_populates="schedules")
    
    def __repr__(self):
        return (
            f"<Schedule(id={self.id}, provider_id={self.provider_id}, "
            f"day={self.day_of_week}, {self.start_time}-{self.end_time})>"
        )
