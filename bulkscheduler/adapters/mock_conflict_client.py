"""
Mock conflict source for previewing schedules without a backend.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..domain.models import ConflictInfo

logger = logging.getLogger(__name__)


class MockConflictClient:
    """
    Serves existing-appointment counts from mock_conflict_data.json.

    Each row looks like ``{"date": "2024-01-02", "time": "09:00", "count": 3}``.
    """

    def __init__(
        self,
        rows: Optional[List[Dict[str, Any]]] = None,
        data_file: Optional[Path] = None,
        capacity: int = 5,
    ):
        """
        Initialize the mock client.

        Args:
            rows: Explicit rows; takes precedence over the data file
            data_file: JSON file to load rows from
            capacity: Used to fill in the ``available`` field
        """
        self.capacity = capacity
        self.calls: List[Dict[str, List[str]]] = []
        if rows is not None:
            self.rows = rows
        else:
            self.rows = self._load_rows(data_file or Path(__file__).parent / "mock_conflict_data.json")

    @staticmethod
    def _load_rows(data_file: Path) -> List[Dict[str, Any]]:
        if not data_file.exists():
            return []

        with open(data_file, "r", encoding="utf-8") as f:
            return json.load(f)

    async def get_conflicts(
        self,
        dates: Sequence[str],
        times: Sequence[str],
    ) -> List[ConflictInfo]:
        """Return rows matching the requested dates and times."""
        self.calls.append({"dates": list(dates), "times": list(times)})

        wanted_dates = set(dates)
        wanted_times = set(times)
        conflicts: List[ConflictInfo] = []

        for row in self.rows:
            if row.get("date") not in wanted_dates or row.get("time") not in wanted_times:
                continue

            try:
                count = int(row.get("count", 0))
            except (TypeError, ValueError) as e:
                logger.warning("Could not parse mock conflict row %r: %s", row, e)
                continue

            if count <= 0:
                continue

            conflicts.append(
                ConflictInfo(
                    date=row["date"],
                    time=row["time"],
                    count=count,
                    available=max(0, self.capacity - count),
                )
            )

        return conflicts
