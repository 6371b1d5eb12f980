"""
Tests for the Typer CLI.
"""

from pathlib import Path

from typer.testing import CliRunner

from bulkscheduler import __version__
from bulkscheduler.cli.app import app

EXAMPLE_CONFIG = str(Path(__file__).parent.parent / "config.example.yaml")

runner = CliRunner()


def test_preview_with_mock_data():
    """Bundled mock data marks the first Tuesday as full."""
    result = runner.invoke(
        app,
        [
            "preview", "tue@09:00",
            "--count", "3",
            "--duration", "60",
            "--start", "2024-01-01",
            "--mock",
            "--config", EXAMPLE_CONFIG,
        ],
    )

    assert result.exit_code == 0, result.output
    assert "02.01.2024" in result.output
    assert "16.01.2024" in result.output
    assert "1 slot(s) are already full" in result.output


def test_preview_outside_business_hours():
    result = runner.invoke(
        app,
        ["preview", "sun@10:00", "--start", "2024-01-01", "--mock", "--config", EXAMPLE_CONFIG],
    )

    assert result.exit_code == 0, result.output
    assert "No slots could be generated" in result.output


def test_preview_rejects_bad_preference():
    result = runner.invoke(
        app,
        ["preview", "someday@09:00", "--mock", "--config", EXAMPLE_CONFIG],
    )

    assert result.exit_code == 1
    assert "Unknown day" in result.output


def test_preview_rejects_bad_start_date():
    result = runner.invoke(
        app,
        ["preview", "tue@09:00", "--start", "01/02/2024", "--mock", "--config", EXAMPLE_CONFIG],
    )

    assert result.exit_code == 1


def test_missing_config(tmp_path):
    result = runner.invoke(
        app,
        ["preview", "tue@09:00", "--mock", "--config", str(tmp_path / "nope.yaml")],
    )

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_hours():
    result = runner.invoke(app, ["hours", "--config", EXAMPLE_CONFIG])

    assert result.exit_code == 0, result.output
    assert "Lunes" in result.output
    assert "closed" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
