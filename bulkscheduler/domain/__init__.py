"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import BusinessHours, ConflictInfo, DayHours, GeneratedSlot, SchedulePreference
from .slot_generator import SlotGenerator, generate

__all__ = [
    "BusinessHours",
    "ConflictInfo",
    "DayHours",
    "GeneratedSlot",
    "SchedulePreference",
    "SlotGenerator",
    "generate",
]
