"""
Domain models for schedule preferences, generated slots and business hours.

Weekdays follow the clinic convention used in stored data:
0=Sunday, 1=Monday, ... 6=Saturday.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, List, Optional, Tuple

from .exceptions import InvalidTimeError

# (YYYY-MM-DD, HH:MM)
SlotKey = Tuple[str, str]

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")

DAY_NAMES = {
    "es": ["Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado"],
    "pt-BR": ["Domingo", "Segunda", "Terça", "Quarta", "Quinta", "Sexta", "Sábado"],
}


def js_weekday(day: date) -> int:
    """Return the weekday of ``day`` with 0=Sunday."""
    return day.isoweekday() % 7


def time_to_minutes(value: str) -> int:
    """
    Convert an ``HH:MM`` string to minutes since midnight.

    Raises:
        InvalidTimeError: If the string is not a valid 24h time
    """
    match = TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidTimeError(f"Invalid time '{value}', expected HH:MM (24h)")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded ``HH:MM`` string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def calculate_end_time(start_time: str, duration_minutes: int) -> str:
    """
    Add ``duration_minutes`` to ``start_time``.

    There is no day rollover: sessions are assumed to end on the same day.
    """
    return minutes_to_time(time_to_minutes(start_time) + duration_minutes)


@dataclass(frozen=True)
class SchedulePreference:
    """A recurring weekday + start time the scheduler should use."""
    day_of_week: int
    time: str


@dataclass(frozen=True)
class GeneratedSlot:
    """
    A candidate appointment, not yet persisted.

    ``preference_index`` points at the preference (in caller order) that
    produced the slot. Conflict fields are filled in by the conflict checker.
    """
    date: date
    day_of_week: int
    start_time: str
    end_time: str
    preference_index: int = 0
    has_conflict: bool = False
    conflict_count: int = 0

    @property
    def key(self) -> SlotKey:
        return (self.date.isoformat(), self.start_time)

    def with_conflicts(self, conflict_count: int, capacity: int) -> "GeneratedSlot":
        """Return a copy carrying the existing-appointment count."""
        return replace(
            self,
            conflict_count=conflict_count,
            has_conflict=conflict_count >= capacity,
        )

    def format_display(self, locale: str = "es") -> str:
        """
        Format the slot for display.
        Format: Weekday, DD.MM.YYYY | HH:MM – HH:MM
        """
        names = DAY_NAMES.get(locale, DAY_NAMES["es"])
        return (
            f"{names[self.day_of_week]}, {self.date.strftime('%d.%m.%Y')} | "
            f"{self.start_time} – {self.end_time}"
        )


@dataclass(frozen=True)
class ConflictInfo:
    """Existing-appointment count reported for one date/time pair."""
    date: str
    time: str
    count: int
    available: Optional[int] = None

    @property
    def key(self) -> SlotKey:
        return (self.date, self.time)


@dataclass
class DayHours:
    """
    Opening window for a single weekday.

    Times are ``HH:MM``; a time is open when ``start <= t < end`` and it does
    not fall inside any break.
    """
    start: str
    end: str
    breaks: List[Tuple[str, str]] = field(default_factory=list)

    def __post_init__(self):
        if time_to_minutes(self.start) >= time_to_minutes(self.end):
            raise ValueError(f"Opening time {self.start} must be before closing time {self.end}")

    def contains(self, value: str) -> bool:
        """Check whether a start time falls inside opening hours."""
        minutes = time_to_minutes(value)
        if minutes < time_to_minutes(self.start) or minutes >= time_to_minutes(self.end):
            return False

        for break_start, break_end in self.breaks:
            if time_to_minutes(break_start) <= minutes < time_to_minutes(break_end):
                return False

        return True

    def __str__(self) -> str:
        text = f"{self.start} - {self.end}"
        if self.breaks:
            pauses = ", ".join(f"{start}-{end}" for start, end in self.breaks)
            text += f" (Pausa {pauses})"
        return text


@dataclass
class BusinessHours:
    """
    Weekly opening hours. A missing or ``None`` entry means closed.
    """
    days: Dict[int, Optional[DayHours]]

    @classmethod
    def default(cls) -> "BusinessHours":
        """The clinic's standard week: closed Sunday, split shift Tue-Sat."""
        split_shift = [("12:00", "14:30")]
        days: Dict[int, Optional[DayHours]] = {
            0: None,
            1: DayHours(start="09:00", end="17:00"),
        }
        for day in range(2, 7):
            days[day] = DayHours(start="09:00", end="18:30", breaks=list(split_shift))
        return cls(days=days)

    def hours_for(self, day_of_week: int) -> Optional[DayHours]:
        return self.days.get(day_of_week)

    def is_open_day(self, day_of_week: int) -> bool:
        return self.hours_for(day_of_week) is not None

    def is_open(self, day_of_week: int, value: str) -> bool:
        """Check if a start time is within business hours on a given weekday."""
        hours = self.hours_for(day_of_week)
        if hours is None:
            return False
        return hours.contains(value)
