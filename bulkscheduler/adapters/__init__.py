"""
Adapters layer - External integrations (appointment backend).
"""

from .conflict_client import ConflictApiClient
from .mock_conflict_client import MockConflictClient

__all__ = ["ConflictApiClient", "MockConflictClient"]
