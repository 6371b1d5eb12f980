"""
Core business logic for generating recurring appointment slots.

Pure domain logic: no API calls, no database, no I/O. Given a start date and
weekly day/time preferences, walk the calendar forward and emit one slot per
matching preference until enough slots exist.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, List, Optional, Sequence

import pendulum
from pendulum import Date

from .exceptions import InvalidTimeError
from .models import (
    BusinessHours,
    GeneratedSlot,
    SchedulePreference,
    calculate_end_time,
    js_weekday,
    minutes_to_time,
    time_to_minutes,
)

logger = logging.getLogger(__name__)

# Never look further ahead than a year unless the count demands it
MIN_SCAN_DAYS = 366


def _as_date(value: date) -> Date:
    return pendulum.date(value.year, value.month, value.day)


class SlotGenerator:
    """
    Generates bulk appointment slots from schedule preferences.

    Algorithm:
    1. Drop preferences whose time is malformed
    2. Walk day by day from the start date (inclusive)
    3. For each day, emit a slot for every preference on that weekday,
       in declaration order, unless the date is excluded or the time is
       outside business hours
    4. Stop once ``count`` slots exist or the scan bound is reached
    """

    def __init__(
        self,
        business_hours: Optional[BusinessHours] = None,
        exclude_dates: Iterable[str] = (),
    ):
        self.business_hours = business_hours
        self.exclude_dates = frozenset(exclude_dates)

    @staticmethod
    def max_scan_days(count: int, start_date: Optional[date] = None) -> int:
        """
        Upper bound on days scanned: a year, or two slots' worth of weeks.

        Never runs past the last representable date.
        """
        bound = max(MIN_SCAN_DAYS, count * 14)
        if start_date is not None:
            bound = min(bound, date.max.toordinal() - start_date.toordinal())
        return bound

    def generate(
        self,
        start_date: date,
        preferences: Sequence[SchedulePreference],
        count: int,
        duration_minutes: int,
    ) -> List[GeneratedSlot]:
        """
        Generate up to ``count`` slots starting at ``start_date``.

        Args:
            start_date: First candidate day (inclusive)
            preferences: Weekday/time pairs, in priority order
            count: Number of slots wanted
            duration_minutes: Session length used to compute end times

        Returns:
            Slots in date order; same-day ties keep preference order.
            Empty when there is nothing to generate.
        """
        if not preferences or count <= 0 or duration_minutes <= 0:
            return []

        usable = self._usable_preferences(preferences)
        if not usable:
            return []

        slots: List[GeneratedSlot] = []
        current = _as_date(start_date)

        for _ in range(self.max_scan_days(count, current)):
            if len(slots) >= count:
                break

            if current.isoformat() not in self.exclude_dates:
                weekday = js_weekday(current)

                for index, preference in usable:
                    if preference.day_of_week != weekday:
                        continue
                    if not self._is_open(weekday, preference.time):
                        continue

                    slots.append(
                        GeneratedSlot(
                            date=current,
                            day_of_week=weekday,
                            start_time=preference.time,
                            end_time=calculate_end_time(preference.time, duration_minutes),
                            preference_index=index,
                        )
                    )

                    if len(slots) >= count:
                        break

            current = current.add(days=1)

        return slots

    def _usable_preferences(self, preferences: Sequence[SchedulePreference]):
        usable = []
        for index, preference in enumerate(preferences):
            try:
                minutes = time_to_minutes(preference.time)
            except InvalidTimeError as exc:
                logger.warning("Ignoring preference #%d: %s", index, exc)
                continue
            # Slot keys must match the backend's zero-padded HH:MM
            usable.append((index, replace(preference, time=minutes_to_time(minutes))))
        return usable

    def _is_open(self, day_of_week: int, start_time: str) -> bool:
        if self.business_hours is None:
            return True
        return self.business_hours.is_open(day_of_week, start_time)


def generate(
    start_date: date,
    preferences: Sequence[SchedulePreference],
    count: int,
    duration_minutes: int,
    business_hours: Optional[BusinessHours] = None,
    exclude_dates: Iterable[str] = (),
) -> List[GeneratedSlot]:
    """Convenience wrapper around ``SlotGenerator.generate``."""
    generator = SlotGenerator(business_hours=business_hours, exclude_dates=exclude_dates)
    return generator.generate(start_date, preferences, count, duration_minutes)
