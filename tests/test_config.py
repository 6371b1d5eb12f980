"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from bulkscheduler.config import AppConfig

EXAMPLE_CONFIG = Path(__file__).parent.parent / "config.example.yaml"


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()

        assert config.scheduling.capacity == 5
        assert config.scheduling.duration_minutes == 60
        assert config.business_hours is None
        assert not config.get_business_hours().is_open_day(0)

    def test_load_example(self):
        config = AppConfig.load_from_yaml(EXAMPLE_CONFIG)

        hours = config.get_business_hours()

        assert config.conflict_api.base_url == "https://clinic.example.com"
        assert config.exclude_dates == ["2024-12-25"]
        assert hours.hours_for(0) is None
        assert hours.is_open(1, "12:30")
        assert not hours.is_open(3, "13:00")

    def test_string_day_keys_are_coerced(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            'business_hours:\n  "2": {start: "08:00", end: "12:00"}\n',
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_file)

        assert config.get_business_hours().is_open(2, "08:00")
        assert not config.get_business_hours().is_open(1, "09:00")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("scheduling: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_file)

    def test_root_must_be_mapping(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_file)

    @pytest.mark.parametrize(
        "data",
        [
            {"scheduling": {"capacity": 0}},
            {"scheduling": {"duration_minutes": 0}},
            {"scheduling": {"count": -1}},
            {"exclude_dates": ["25.12.2024"]},
            {"business_hours": {7: {"start": "09:00", "end": "17:00"}}},
            {"business_hours": {1: {"start": "17:00", "end": "09:00"}}},
            {"business_hours": {1: {"start": "9am", "end": "17:00"}}},
            {"business_hours": {1: {"start": "09:00", "end": "17:00", "breaks": [["13:00", "12:00"]]}}},
            {"locale": "fr"},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ValueError):
            AppConfig(**data)

    def test_exclude_dates_deduplicated(self):
        config = AppConfig(exclude_dates=["2024-12-25", "2024-12-25", "2025-01-01"])

        assert config.exclude_dates == ["2024-12-25", "2025-01-01"]
