"""
Advisory conflict lookup for generated slots.

The checker asks a conflict source for existing-appointment counts and turns
them into a ``(date, time) -> count`` table. It is a preview aid, not a
reservation: when the source is unreachable it reports no conflicts and lets
the write path re-validate.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Protocol, Sequence

from ..domain.exceptions import ConflictCheckError
from ..domain.models import ConflictInfo, GeneratedSlot, SlotKey

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5


class ConflictClientProtocol(Protocol):
    """Protocol describing the conflict source needed by the checker."""

    async def get_conflicts(
        self,
        dates: Sequence[str],
        times: Sequence[str],
    ) -> List[ConflictInfo]:
        """Return counts for date/time pairs that have appointments."""


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


class ConflictChecker:
    """
    Looks up existing-appointment counts for a batch of slots.

    A slot is full once its count reaches ``capacity``.
    """

    def __init__(self, client: ConflictClientProtocol, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._client = client
        self.capacity = capacity

    async def check_conflicts(self, slots: Sequence[GeneratedSlot]) -> Dict[SlotKey, int]:
        """
        Fetch existing counts for the distinct date/time pairs in ``slots``.

        No request is made for an empty batch. Fetch failures are logged and
        reported as an empty table.
        """
        if not slots:
            return {}

        wanted = {slot.key for slot in slots}
        dates = _unique(slot.date.isoformat() for slot in slots)
        times = _unique(slot.start_time for slot in slots)

        try:
            conflicts = await self._client.get_conflicts(dates, times)
        except (ConflictCheckError, OSError) as exc:
            logger.warning("Conflict check failed, assuming no conflicts: %s", exc)
            return {}

        return self._restrict_to_requested(wanted, conflicts)

    @staticmethod
    def _restrict_to_requested(
        wanted: set[SlotKey],
        conflicts: Iterable[ConflictInfo],
    ) -> Dict[SlotKey, int]:
        """
        Keep only pairs some slot actually uses.

        The source answers for the cross product of dates and times, which
        includes pairs no slot asked for.
        """
        table: Dict[SlotKey, int] = {}

        for conflict in conflicts:
            if conflict.count > 0 and conflict.key in wanted:
                table[conflict.key] = conflict.count

        logger.debug("Found %d occupied slot(s) out of %d requested", len(table), len(wanted))
        return table

    def is_full(self, existing_count: int) -> bool:
        return existing_count >= self.capacity

    def annotate(
        self,
        slots: Sequence[GeneratedSlot],
        conflicts: Dict[SlotKey, int],
    ) -> List[GeneratedSlot]:
        """Return copies of ``slots`` carrying their conflict counts."""
        return [
            slot.with_conflicts(conflicts.get(slot.key, 0), self.capacity)
            for slot in slots
        ]
