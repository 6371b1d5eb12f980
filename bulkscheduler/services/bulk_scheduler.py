"""
Application service for previewing and planning bulk appointments.

Slot generation stays in the domain layer; this service pairs it with the
conflict checker and validates a booking against the package's remaining
sessions before anything is handed to the write path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..domain.exceptions import NoSessionsRemainingError
from ..domain.models import GeneratedSlot, SchedulePreference, SlotKey
from ..domain.preferences import schedule_span
from ..domain.slot_generator import SlotGenerator
from .conflict_checker import ConflictChecker


@dataclass
class SchedulePreview:
    """Generated slots annotated with existing-appointment counts."""
    slots: List[GeneratedSlot]
    conflicts: Dict[SlotKey, int] = field(default_factory=dict)

    @property
    def conflict_total(self) -> int:
        """Number of slots that are already full."""
        return sum(1 for slot in self.slots if slot.has_conflict)

    @property
    def span(self) -> tuple[int, Optional[date], Optional[date]]:
        return schedule_span(self.slots)


class BulkSchedulingService:
    """Orchestrates slot generation and the advisory conflict check."""

    def __init__(
        self,
        conflict_checker: ConflictChecker,
        slot_generator: SlotGenerator,
    ) -> None:
        self._conflict_checker = conflict_checker
        self._slot_generator = slot_generator

    def generate_slots(
        self,
        *,
        start_date: date,
        preferences: Sequence[SchedulePreference],
        count: int,
        duration_minutes: int,
    ) -> List[GeneratedSlot]:
        return self._slot_generator.generate(
            start_date=start_date,
            preferences=preferences,
            count=count,
            duration_minutes=duration_minutes,
        )

    async def preview(
        self,
        *,
        start_date: date,
        preferences: Sequence[SchedulePreference],
        count: int,
        duration_minutes: int,
    ) -> SchedulePreview:
        """
        Generate slots and mark those already at capacity.
        """
        slots = self.generate_slots(
            start_date=start_date,
            preferences=preferences,
            count=count,
            duration_minutes=duration_minutes,
        )

        conflicts = await self._conflict_checker.check_conflicts(slots)

        return SchedulePreview(
            slots=self._conflict_checker.annotate(slots, conflicts),
            conflicts=conflicts,
        )

    @staticmethod
    def plan_booking(
        slots: Sequence[GeneratedSlot],
        *,
        remaining_sessions: int,
        already_scheduled: int = 0,
    ) -> List[Dict[str, str]]:
        """
        Build appointment payloads for the write path.

        Args:
            slots: Slots the user confirmed
            remaining_sessions: Sessions left on the package purchase
            already_scheduled: Appointments already booked against the package

        Returns:
            ``{"date", "startTime", "endTime"}`` dicts in slot order

        Raises:
            NoSessionsRemainingError: If the package cannot cover every slot
        """
        available = max(0, remaining_sessions - already_scheduled)

        if len(slots) > available:
            raise NoSessionsRemainingError(requested=len(slots), available=available)

        return [
            {
                "date": slot.date.isoformat(),
                "startTime": slot.start_time,
                "endTime": slot.end_time,
            }
            for slot in slots
        ]
