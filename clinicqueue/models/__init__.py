from .provider import Provider, ProviderType
from .patient import Patient
from .schedule import Schedule
from .appointment import Appointment, AppointmentStatus

__all__ = [
    "Provider",
    "ProviderType",
    "Patient",
    "Schedule",
    "Appointment",
    "AppointmentStatus",
]
