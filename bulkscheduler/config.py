"""
Configuration management using Pydantic models loaded from YAML.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import TIME_PATTERN, BusinessHours, DayHours, time_to_minutes

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _check_time(value: str) -> str:
    if not TIME_PATTERN.match(value):
        raise ValueError(f"Time must be HH:MM (24h), got '{value}'")
    return value


class SchedulingConfig(BaseModel):
    """Default settings for bulk scheduling."""
    capacity: int = 5
    duration_minutes: int = 60
    count: int = 4

    @field_validator("capacity")
    @classmethod
    def validate_capacity(cls, value: int) -> int:
        """Ensure at least one appointment fits in a slot."""
        if value < 1:
            raise ValueError("capacity must be at least 1")
        return value

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure session duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    @field_validator("count")
    @classmethod
    def validate_count(cls, value: int) -> int:
        if value < 0:
            raise ValueError("count cannot be negative")
        return value


class ConflictApiConfig(BaseModel):
    """Where existing-appointment counts come from."""
    base_url: str = ""
    token: str = ""
    timeout_seconds: float = 10

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class DayHoursConfig(BaseModel):
    """Opening hours for one weekday."""
    start: str
    end: str
    breaks: List[Tuple[str, str]] = Field(default_factory=list)

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _check_time(value)

    @field_validator("breaks")
    @classmethod
    def validate_breaks(cls, value: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
        for start, end in value:
            _check_time(start)
            _check_time(end)
            if time_to_minutes(start) >= time_to_minutes(end):
                raise ValueError(f"Break {start}-{end} must start before it ends")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DayHoursConfig":
        """Ensure the day opens before it closes."""
        if time_to_minutes(self.end) <= time_to_minutes(self.start):
            raise ValueError("end must be later than start")
        return self

    def to_domain(self) -> DayHours:
        return DayHours(start=self.start, end=self.end, breaks=list(self.breaks))


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/La_Paz"
    locale: str = "es"
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    conflict_api: ConflictApiConfig = Field(default_factory=ConflictApiConfig)
    exclude_dates: List[str] = Field(default_factory=list)
    # Weekday (0=Sunday) -> hours; null marks a closed day
    business_hours: Optional[Dict[int, Optional[DayHoursConfig]]] = None

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, value: str) -> str:
        if value not in ("es", "pt-BR"):
            raise ValueError(f"locale must be 'es' or 'pt-BR', got '{value}'")
        return value

    @field_validator("exclude_dates")
    @classmethod
    def validate_exclude_dates(cls, value: List[str]) -> List[str]:
        """Ensure dates are YYYY-MM-DD and deduplicated."""
        invalid = [day for day in value if not DATE_PATTERN.match(day)]
        if invalid:
            raise ValueError(f"exclude_dates must be YYYY-MM-DD, got {invalid}")
        return list(dict.fromkeys(value))

    @field_validator("business_hours")
    @classmethod
    def validate_business_days(
        cls,
        value: Optional[Dict[int, Optional[DayHoursConfig]]],
    ) -> Optional[Dict[int, Optional[DayHoursConfig]]]:
        """Ensure weekdays are in valid range."""
        if value is None:
            return value
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"business_hours days must be between 0 and 6, got {invalid_days}")
        return value

    def get_business_hours(self) -> BusinessHours:
        """Business hours as a domain object, falling back to the standard week."""
        if self.business_hours is None:
            return BusinessHours.default()

        return BusinessHours(
            days={
                day: hours.to_domain() if hours is not None else None
                for day, hours in self.business_hours.items()
            }
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
