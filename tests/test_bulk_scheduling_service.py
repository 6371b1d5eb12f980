"""
Tests for the BulkSchedulingService orchestration layer.
"""

import asyncio
from datetime import date

import pytest

from bulkscheduler.adapters.mock_conflict_client import MockConflictClient
from bulkscheduler.domain.exceptions import NoSessionsRemainingError
from bulkscheduler.domain.models import BusinessHours, SchedulePreference
from bulkscheduler.domain.slot_generator import SlotGenerator
from bulkscheduler.services.bulk_scheduler import BulkSchedulingService
from bulkscheduler.services.conflict_checker import ConflictChecker


def _build_service(rows) -> BulkSchedulingService:
    client = MockConflictClient(rows=rows)
    generator = SlotGenerator(business_hours=BusinessHours.default())
    return BulkSchedulingService(
        conflict_checker=ConflictChecker(client, capacity=5),
        slot_generator=generator,
    )


def test_preview_marks_full_slots():
    """End-to-end preview should annotate slots with existing counts."""
    service = _build_service(
        rows=[
            {"date": "2024-01-02", "time": "09:00", "count": 5},
            {"date": "2024-01-09", "time": "09:00", "count": 2},
        ]
    )

    preview = asyncio.run(
        service.preview(
            start_date=date(2024, 1, 1),
            preferences=[SchedulePreference(day_of_week=2, time="09:00")],
            count=3,
            duration_minutes=60,
        )
    )

    assert [slot.conflict_count for slot in preview.slots] == [5, 2, 0]
    assert [slot.has_conflict for slot in preview.slots] == [True, False, False]
    assert preview.conflict_total == 1
    assert preview.span == (2, date(2024, 1, 2), date(2024, 1, 16))


def test_preview_without_slots_skips_conflict_query():
    client = MockConflictClient(rows=[])
    service = BulkSchedulingService(
        conflict_checker=ConflictChecker(client),
        slot_generator=SlotGenerator(),
    )

    preview = asyncio.run(
        service.preview(start_date=date(2024, 1, 1), preferences=[], count=3, duration_minutes=60)
    )

    assert preview.slots == []
    assert preview.conflict_total == 0
    assert client.calls == []


def test_mock_client_loads_bundled_data():
    client = MockConflictClient()

    conflicts = asyncio.run(client.get_conflicts(["2024-01-02"], ["09:00", "10:00"]))

    assert {conflict.key: conflict.count for conflict in conflicts} == {
        ("2024-01-02", "09:00"): 5,
        ("2024-01-02", "10:00"): 2,
    }
    assert conflicts[0].available == 0


class TestPlanBooking:
    """Tests for validating a booking against remaining sessions."""

    def _slots(self, count):
        generator = SlotGenerator()
        return generator.generate(date(2024, 1, 1), [SchedulePreference(2, "09:00")], count, 60)

    def test_payloads(self):
        payloads = BulkSchedulingService.plan_booking(self._slots(2), remaining_sessions=4)

        assert payloads == [
            {"date": "2024-01-02", "startTime": "09:00", "endTime": "10:00"},
            {"date": "2024-01-09", "startTime": "09:00", "endTime": "10:00"},
        ]

    def test_already_scheduled_sessions_count(self):
        with pytest.raises(NoSessionsRemainingError) as exc_info:
            BulkSchedulingService.plan_booking(
                self._slots(3),
                remaining_sessions=4,
                already_scheduled=2,
            )

        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2

    def test_exact_fit(self):
        payloads = BulkSchedulingService.plan_booking(
            self._slots(2),
            remaining_sessions=4,
            already_scheduled=2,
        )

        assert len(payloads) == 2
