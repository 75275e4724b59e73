from sqlalchemy import Column, Integer, String, DateTime, Boolean, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class ProviderType(str, enum.Enum):
    DOCTOR = "doctor"
    NURSE = "nurse"

class Provider(Base):
    __tablename__ = "providers"
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Personal information
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    
    # Professional information
    license_number = Column(String(50), nullable=False, unique=True)
    specialty = Column(String(100), nullable=False, default="")
    provider_type = Column(SQLEnum(ProviderType), nullable=False, default=ProviderType.DOCTOR)
    is_active = Column(Boolean, default=True)
    
    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    
    # Relationships
    schedules = relationship("Schedule", back_populates="provider", cascade="all, delete-orphan")
    appointments = relationship("Appointment", back_populates="provider")
    
    def __repr__(self):
        return f"<Provider(id={self.id}, name='{self.first_name} {self.last_name}', type='{self.provider_type}')>"
