"""
Helpers for reading, writing and describing schedule preferences.
"""

import json
from datetime import date
from typing import List, Optional, Sequence, Tuple

from .exceptions import InvalidPreferenceError, InvalidTimeError
from .models import (
    DAY_NAMES,
    BusinessHours,
    GeneratedSlot,
    SchedulePreference,
    minutes_to_time,
    time_to_minutes,
)

# Scheduling is only offered Monday to Saturday
SCHEDULABLE_DAYS = [1, 2, 3, 4, 5, 6]

DAY_ALIASES = {
    "sun": 0, "sunday": 0,
    "mon": 1, "monday": 1,
    "tue": 2, "tuesday": 2,
    "wed": 3, "wednesday": 3,
    "thu": 4, "thursday": 4,
    "fri": 5, "friday": 5,
    "sat": 6, "saturday": 6,
}


def parse_preferences(raw: Optional[str]) -> List[SchedulePreference]:
    """
    Parse preferences from their stored JSON form.

    Example input: ``[{"dayOfWeek": 1, "time": "09:00"}]``

    Invalid JSON or a non-list payload yields an empty list; malformed
    entries are skipped.
    """
    if not raw:
        return []

    try:
        data = json.loads(raw)
    except ValueError:
        return []

    if not isinstance(data, list):
        return []

    preferences: List[SchedulePreference] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        day = item.get("dayOfWeek")
        value = item.get("time")
        if isinstance(day, bool) or not isinstance(day, int) or not isinstance(value, str):
            continue
        if not 0 <= day <= 6:
            continue
        preferences.append(SchedulePreference(day_of_week=day, time=value))

    return preferences


def dump_preferences(preferences: Sequence[SchedulePreference]) -> str:
    """Serialize preferences to the stored JSON form."""
    return json.dumps(
        [{"dayOfWeek": p.day_of_week, "time": p.time} for p in preferences],
        separators=(",", ":"),
    )


def day_name(day_of_week: int, locale: str = "es") -> str:
    """Localized weekday name, or an empty string for an unknown day."""
    names = DAY_NAMES["pt-BR"] if locale == "pt-BR" else DAY_NAMES["es"]
    if not 0 <= day_of_week < len(names):
        return ""
    return names[day_of_week]


def day_name_short(day_of_week: int, locale: str = "es") -> str:
    return day_name(day_of_week, locale)[:3]


def format_preferences(preferences: Sequence[SchedulePreference], locale: str = "es") -> str:
    """
    Format preferences as readable text.

    >>> format_preferences([SchedulePreference(1, "09:00"), SchedulePreference(4, "15:00")])
    'Lunes 09:00, Jueves 15:00'
    """
    return ", ".join(f"{day_name(p.day_of_week, locale)} {p.time}" for p in preferences)


def is_valid_preference(
    preference: SchedulePreference,
    business_hours: Optional[BusinessHours] = None,
) -> bool:
    """Check a preference is on a schedulable day, well-formed and within hours."""
    if preference.day_of_week not in SCHEDULABLE_DAYS:
        return False

    try:
        time_to_minutes(preference.time)
    except InvalidTimeError:
        return False

    hours = business_hours or BusinessHours.default()
    return hours.is_open(preference.day_of_week, preference.time)


def available_times_for_day(
    day_of_week: int,
    business_hours: Optional[BusinessHours] = None,
    step_minutes: int = 30,
) -> List[str]:
    """Selectable start times for a weekday, in ``step_minutes`` increments."""
    hours = (business_hours or BusinessHours.default()).hours_for(day_of_week)
    if hours is None:
        return []

    times: List[str] = []
    current = time_to_minutes(hours.start)
    end = time_to_minutes(hours.end)

    while current < end:
        value = minutes_to_time(current)
        if hours.contains(value):
            times.append(value)
        current += step_minutes

    return times


def schedule_span(slots: Sequence[GeneratedSlot]) -> Tuple[int, Optional[date], Optional[date]]:
    """
    How many weeks the slots cover.

    Returns:
        (weeks, first date, last date); ``(0, None, None)`` when empty
    """
    if not slots:
        return 0, None, None

    first = slots[0].date
    last = slots[-1].date
    days = (last - first).days
    weeks = -(-days // 7)

    return weeks, first, last


def parse_preference_arg(value: str) -> SchedulePreference:
    """
    Parse a command-line preference such as ``tue@09:00`` or ``2@09:00``.

    Raises:
        InvalidPreferenceError: If the day or time cannot be understood
    """
    day_part, sep, time_part = value.partition("@")
    if not sep:
        raise InvalidPreferenceError(f"Preference '{value}' must look like DAY@HH:MM")

    day_key = day_part.strip().lower()
    if day_key.isdigit():
        day = int(day_key)
        if not 0 <= day <= 6:
            raise InvalidPreferenceError(f"Day must be between 0 (Sunday) and 6, got {day}")
    elif day_key in DAY_ALIASES:
        day = DAY_ALIASES[day_key]
    else:
        raise InvalidPreferenceError(f"Unknown day '{day_part}'")

    try:
        minutes = time_to_minutes(time_part)
    except InvalidTimeError as exc:
        raise InvalidPreferenceError(str(exc)) from exc

    return SchedulePreference(day_of_week=day, time=minutes_to_time(minutes))
