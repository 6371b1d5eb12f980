"""
Domain-specific exception hierarchy for the bulk scheduler.
"""


class SchedulingError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeError(SchedulingError, ValueError):
    """Raised when a time string is not a valid 24h ``HH:MM`` value."""


class InvalidPreferenceError(SchedulingError, ValueError):
    """Raised when a schedule preference cannot be parsed."""


class ConflictCheckError(SchedulingError):
    """Raised when existing-appointment counts cannot be fetched or parsed."""


class NoSessionsRemainingError(SchedulingError):
    """Raised when more appointments are requested than the package has left."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Requested {requested} appointment(s) but only {available} session(s) remain"
        )
