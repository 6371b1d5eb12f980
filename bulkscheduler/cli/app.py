"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.conflict_client import ConflictApiClient
from ..adapters.mock_conflict_client import MockConflictClient
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import InvalidPreferenceError
from ..domain.preferences import (
    available_times_for_day,
    day_name,
    format_preferences,
    parse_preference_arg,
)
from ..domain.slot_generator import SlotGenerator
from ..services.bulk_scheduler import BulkSchedulingService, SchedulePreview
from ..services.conflict_checker import ConflictChecker

app = typer.Typer(
    name="bulkscheduler",
    help="Preview recurring appointment slots for session packages",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    try:
        return AppConfig.load_from_yaml(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


def _resolve_start_date(start: Optional[str], tz: str):
    """Explicit start date, or tomorrow in the configured timezone."""
    if not start:
        return pendulum.now(tz).add(days=1).date()

    try:
        return pendulum.from_format(start, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse start date '{escape(start)}': {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _build_service(config: AppConfig, mock: bool) -> BulkSchedulingService:
    capacity = config.scheduling.capacity

    if mock:
        client = MockConflictClient(capacity=capacity)
    elif config.conflict_api.base_url:
        client = ConflictApiClient(
            base_url=config.conflict_api.base_url,
            token=config.conflict_api.token or None,
            timeout=config.conflict_api.timeout_seconds,
        )
    else:
        console.print("[bold red]Error:[/bold red] conflict_api.base_url is not configured (or use --mock)")
        raise typer.Exit(1)

    generator = SlotGenerator(
        business_hours=config.get_business_hours(),
        exclude_dates=config.exclude_dates,
    )
    return BulkSchedulingService(
        conflict_checker=ConflictChecker(client, capacity=capacity),
        slot_generator=generator,
    )


def _render_preview(preview: SchedulePreview, config: AppConfig) -> None:
    table = Table(
        title="Generated appointments",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="bold")
    table.add_column("Day")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Existing", justify="right")
    table.add_column("Status")

    capacity = config.scheduling.capacity
    for index, slot in enumerate(preview.slots, 1):
        if slot.has_conflict:
            status = "[red]full[/red]"
        elif slot.conflict_count:
            status = f"[yellow]{capacity - slot.conflict_count} left[/yellow]"
        else:
            status = "[green]free[/green]"

        table.add_row(
            str(index),
            slot.date.strftime("%d.%m.%Y"),
            day_name(slot.day_of_week, config.locale),
            slot.start_time,
            slot.end_time,
            str(slot.conflict_count),
            status,
        )

    console.print()
    console.print(table)

    weeks, first, last = preview.span
    console.print(
        f"\n   {len(preview.slots)} slot(s) from {first.strftime('%d.%m.%Y')} "
        f"to {last.strftime('%d.%m.%Y')} ({weeks} week(s))"
    )
    if preview.conflict_total:
        console.print(f"[bold red]⚠ {preview.conflict_total} slot(s) are already full[/bold red]")
    else:
        console.print("[green]✓ No full slots[/green]")


@app.command()
def preview(
    preferences: Annotated[List[str], typer.Argument(help="Day/time preferences, e.g. 'tue@09:00 thu@15:00'")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="First candidate date (YYYY-MM-DD). Defaults to tomorrow.")] = None,
    count: Annotated[Optional[int], typer.Option("--count", "-n", help="Number of appointments")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Session duration in minutes")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Use mock conflict data instead of the backend.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Generate recurring slots and check them for conflicts.

    Examples:

        bulkscheduler preview tue@09:00 --count 3 --start 2024-01-01 --mock

        bulkscheduler preview mon@10:00 thu@15:00 -n 8 -d 45
    """
    _configure_logging(verbose)
    config = _load_config(config_file)

    try:
        parsed = [parse_preference_arg(value) for value in preferences]
    except InvalidPreferenceError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    start_date = _resolve_start_date(start, config.timezone)
    slot_count = count if count is not None else config.scheduling.count
    minutes = duration if duration is not None else config.scheduling.duration_minutes

    console.print("[bold cyan]📊 Summary:[/bold cyan]")
    console.print(f"   Preferences: {format_preferences(parsed, config.locale)}")
    console.print(f"   From: {start_date.strftime('%d.%m.%Y')}")
    console.print(f"   Sessions: {slot_count} × {minutes} min")
    if mock:
        console.print("[yellow]⚠  MOCK MODE: using sample conflict data[/yellow]")

    service = _build_service(config, mock)
    result = asyncio.run(
        service.preview(
            start_date=start_date,
            preferences=parsed,
            count=slot_count,
            duration_minutes=minutes,
        )
    )

    if not result.slots:
        console.print(
            "\n[yellow]⚠ No slots could be generated.[/yellow]\n"
            "Check that the preferred times fall within business hours."
        )
        return

    if len(result.slots) < slot_count:
        console.print(
            f"\n[yellow]⚠ Only {len(result.slots)} of {slot_count} slot(s) could be generated.[/yellow]"
        )

    _render_preview(result, config)
    console.print()


@app.command()
def hours(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    Show business hours and selectable start times.
    """
    config = _load_config(config_file)
    business_hours = config.get_business_hours()

    table = Table(
        title="Business hours",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Hours")
    table.add_column("Start times", style="dim")

    for day in (1, 2, 3, 4, 5, 6, 0):
        day_hours = business_hours.hours_for(day)
        times = available_times_for_day(day, business_hours)
        table.add_row(
            day_name(day, config.locale),
            str(day_hours) if day_hours else "[red]closed[/red]",
            " ".join(times),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bulkscheduler[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
