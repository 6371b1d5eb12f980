"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .bulk_scheduler import BulkSchedulingService, SchedulePreview
from .conflict_checker import ConflictChecker, ConflictClientProtocol

__all__ = ["BulkSchedulingService", "ConflictChecker", "ConflictClientProtocol", "SchedulePreview"]
