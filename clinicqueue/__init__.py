"""
Clinic Queue Scheduling

A FastAPI-based service for clinic providers, patients and appointments,
built around an availability engine that turns weekly schedules and
existing bookings into bookable slots.
"""

__version__ = "1.0.0"
