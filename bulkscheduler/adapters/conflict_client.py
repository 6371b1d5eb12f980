"""
HTTP client for the appointment backend's check-conflicts endpoint.
"""

import asyncio
import logging
from typing import Any, Dict, List, Sequence

import requests

from ..domain.exceptions import ConflictCheckError
from ..domain.models import ConflictInfo

logger = logging.getLogger(__name__)


class ConflictApiClient:
    """
    Client for existing-appointment counts.

    Calls ``GET /api/appointments/check-conflicts?dates=...&times=...`` which
    reports every date/time pair that already has appointments.
    """

    CHECK_CONFLICTS_PATH = "/api/appointments/check-conflicts"

    def __init__(self, base_url: str, token: str | None = None, timeout: float = 10):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the appointment backend
            token: Optional bearer token
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    async def get_conflicts(
        self,
        dates: Sequence[str],
        times: Sequence[str],
    ) -> List[ConflictInfo]:
        """Fetch conflicts without blocking the event loop."""
        return await asyncio.to_thread(self.fetch_conflicts, dates, times)

    def fetch_conflicts(
        self,
        dates: Sequence[str],
        times: Sequence[str],
    ) -> List[ConflictInfo]:
        """
        Fetch existing-appointment counts for the cross product of dates and times.

        Args:
            dates: Distinct dates (YYYY-MM-DD)
            times: Distinct start times (HH:MM)

        Returns:
            One ConflictInfo per pair with at least one appointment

        Raises:
            ConflictCheckError: If the request fails or the response is unreadable
        """
        if not dates or not times:
            return []

        url = f"{self.base_url}{self.CHECK_CONFLICTS_PATH}"
        params = {"dates": ",".join(dates), "times": ",".join(times)}

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise ConflictCheckError(f"Failed to fetch conflicts: {e}") from e

        except ValueError as e:
            raise ConflictCheckError(f"Conflict response is not valid JSON: {e}") from e

        return self._parse_conflicts_response(data)

    def _parse_conflicts_response(self, response_data: Dict[str, Any]) -> List[ConflictInfo]:
        """
        Parse the endpoint response into domain objects.

        Response format:
        {
            "conflicts": [
                {"date": "2024-01-02", "time": "09:00", "count": 5, "available": 0}
            ]
        }
        """
        if not isinstance(response_data, dict):
            raise ConflictCheckError("Conflict response must be a JSON object")

        items = response_data.get("conflicts") or []
        if not isinstance(items, list):
            raise ConflictCheckError("Conflict response 'conflicts' must be a list")

        conflicts: List[ConflictInfo] = []

        for item in items:
            try:
                available = item.get("available")
                conflicts.append(
                    ConflictInfo(
                        date=str(item["date"]),
                        time=str(item["time"]),
                        count=int(item["count"]),
                        available=int(available) if available is not None else None,
                    )
                )

            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Could not parse conflict entry %r: %s", item, e)
                continue

        return conflicts
