"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.fixture_store import FixtureStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import CalendarError
from ..domain.models import CalendarPartition
from ..domain.profiles import AvailabilityDay
from ..domain.recurring_slots import RecurringSlotEngine
from ..domain.timeutils import MINUTES_PER_DAY, to_utc
from ..services.calendar_service import CalendarService
from ..services.query import CalendarQuery

app = typer.Typer(
    name="meetcal",
    help="Compute bookable availability calendars for events and meeting hubs",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", help="Fixture file with events, records and profiles")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging of every pipeline stage.")]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the configuration.

    An explicitly passed file must exist; without one the defaults apply
    when no config.yaml can be found.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    config_path = get_default_config_path()
    if not config_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _load_store(config: AppConfig, data_file: Optional[Path]) -> FixtureStore:
    return FixtureStore.load(config.resolve_data_file(data_file))


def _build_service(config: AppConfig, store: FixtureStore) -> CalendarService:
    return CalendarService(
        event_source=store,
        group_directory=store,
        record_store=store,
        profile_repository=store,
        table_availability=store,
        engine_config=config.engine,
    )


def _weekday_label(weekday: int) -> str:
    return AvailabilityDay.from_weekday(weekday).value[:3].title()


def _format_minute(minute: int) -> str:
    """Render minutes after midnight; times on the next day get a +1 marker."""
    days, rest = divmod(minute, MINUTES_PER_DAY)
    label = f"{rest // 60:02d}:{rest % 60:02d}"
    return f"{label} (+{days})" if days else label


def _render_partition(
    partition: CalendarPartition,
    tz: str,
    include_unavailable: bool,
    include_tables: bool
) -> None:
    start = partition.query_start.in_timezone(tz)
    end = partition.query_end.in_timezone(tz)
    console.print(f"   Range: {start.format('YYYY-MM-DD HH:mm')} - {end.format('YYYY-MM-DD HH:mm')} ({tz})")
    console.print()

    if not partition.available:
        console.print(
            "[yellow]⚠ No available slots found.[/yellow]\n"
            "Try a longer range, fewer participants or a shorter duration."
        )
    else:
        table = Table(
            title=f"{len(partition.available)} available interval(s)",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Day", style="bold yellow")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Minutes", justify="right")
        table.add_column("Durations", style="green")
        if include_tables:
            table.add_column("Tables", style="dim")

        for interval in partition.available:
            local_start = interval.start.in_timezone(tz)
            local_end = interval.end.in_timezone(tz)
            row = [
                local_start.format("ddd YYYY-MM-DD"),
                local_start.format("HH:mm"),
                local_end.format("YYYY-MM-DD HH:mm") if local_end.date() != local_start.date() else local_end.format("HH:mm"),
                str(interval.duration_minutes()),
                ", ".join(str(d) for d in sorted(interval.durations)) or "-",
            ]
            if include_tables:
                row.append(", ".join(interval.tables) or "-")
            table.add_row(*row)

        console.print(table)

    if include_unavailable and partition.unavailable:
        blocked = Table(
            title=f"{len(partition.unavailable)} unavailable interval(s)",
            show_header=True,
            header_style="bold red"
        )
        blocked.add_column("Start")
        blocked.add_column("End")

        for interval in partition.unavailable:
            blocked.add_row(
                interval.start.in_timezone(tz).format("ddd YYYY-MM-DD HH:mm"),
                interval.end.in_timezone(tz).format("ddd YYYY-MM-DD HH:mm"),
            )

        console.print()
        console.print(blocked)


@app.command()
def availability(
    event_id: Annotated[Optional[str], typer.Option("--event", "-e", help="Event id (required outside the meeting hub)")] = None,
    contact_id: Annotated[Optional[str], typer.Option("--contact", help="Requesting contact id")] = None,
    hosts: Annotated[Optional[List[str]], typer.Option("--host", help="Host contact id (repeatable)")] = None,
    guests: Annotated[Optional[List[str]], typer.Option("--guest", help="Guest contact id (repeatable)")] = None,
    host_company: Annotated[Optional[str], typer.Option("--host-company", help="Host company id")] = None,
    guest_company: Annotated[Optional[str], typer.Option("--guest-company", help="Guest company id")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start of the requested range (ISO 8601)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End of the requested range (ISO 8601)")] = None,
    meeting_hub: Annotated[bool, typer.Option("--meeting-hub", help="Compute the meeting-hub calendar (day buckets).")] = False,
    page: Annotated[Optional[int], typer.Option("--page", "-p", help="Meeting-hub page, 1 = starting today")] = None,
    link: Annotated[Optional[str], typer.Option("--link", help="Booking link selecting one availability profile")] = None,
    hall_id: Annotated[Optional[str], typer.Option("--hall", help="Hall whose tables must be free")] = None,
    from_time: Annotated[Optional[str], typer.Option("--from-time", help="Earliest clock time (HH:mm, UTC)")] = None,
    to_time: Annotated[Optional[str], typer.Option("--to-time", help="Latest clock time (HH:mm, UTC)")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Exact meeting duration in minutes")] = None,
    dates: Annotated[Optional[List[str]], typer.Option("--date", help="Only show this day, YYYY-MM-DD (repeatable)")] = None,
    include_unavailable: Annotated[bool, typer.Option("--include-unavailable", help="Also list blocked time.")] = False,
    include_tables: Annotated[bool, typer.Option("--include-tables", help="List the free tables of --hall.")] = False,
    language: Annotated[Optional[str], typer.Option("--language", help="Language for error messages")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Compute the availability calendar.

    Examples:

        # Event hub, requester plus one guest
        meetcal availability --event expo --contact alice --guest bob

        # Meeting hub, second page, 30 minute meetings only
        meetcal availability --meeting-hub --host alice --page 2 -d 30

        # Restrict to afternoons on two days
        meetcal availability -e expo --from-time 13:00 --to-time 18:00 --date 2030-03-04 --date 2030-03-05
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        store = _load_store(config, data_file)
        service = _build_service(config, store)

        query = CalendarQuery(
            page=page,
            event_id=event_id,
            contact_id=contact_id,
            host_ids=hosts or [],
            guest_ids=guests or [],
            host_company_id=host_company,
            guest_company_id=guest_company,
            user_start_date=to_utc(start) if start else None,
            user_end_date=to_utc(end) if end else None,
            meeting_hub_event=meeting_hub,
            link=link,
            hall_id=hall_id,
            from_time=from_time,
            to_time=to_time,
            duration=duration,
            specific_dates=dates or [],
            language=language,
        )

        try:
            partition = asyncio.run(
                service.get_availability(
                    query,
                    include_unavailable=include_unavailable,
                    include_tables=include_tables,
                )
            )
        except CalendarError as e:
            console.print(f"[bold red]Error:[/bold red] {service.localize(e, query.language)}")
            raise typer.Exit(1)

        console.print()
        console.print("[bold cyan]📊 Availability[/bold cyan]")
        _render_partition(partition, config.display_timezone, include_unavailable, include_tables)
        console.print()

    except typer.Exit:
        raise

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def validate_meeting(
    event_id: Annotated[str, typer.Option("--event", "-e", help="Event id")],
    start: Annotated[str, typer.Option("--start", help="Meeting start (ISO 8601)")],
    end: Annotated[str, typer.Option("--end", help="Meeting end (ISO 8601)")],
    past_meeting: Annotated[bool, typer.Option("--past-meeting", help="Allow meetings in the past.")] = False,
    language: Annotated[Optional[str], typer.Option("--language", help="Language for messages")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Check that a meeting time lies inside one of the event's open windows.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, _load_store(config, data_file))

        result = asyncio.run(
            service.validate_event_meeting_time(
                event_id,
                to_utc(start),
                to_utc(end),
                past_meeting=past_meeting,
                language=language,
            )
        )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if result.status:
        console.print(Panel.fit(f"[bold green]✓ {result.message}[/bold green]", title="Meeting time"))
    else:
        console.print(Panel.fit(f"[bold red]✗ {result.message}[/bold red]", title="Meeting time"))
        raise typer.Exit(1)


@app.command()
def profiles(
    contact_ids: Annotated[Optional[List[str]], typer.Argument(help="Contact ids to show. Shows every profile when omitted.")] = None,
    common: Annotated[bool, typer.Option("--common", help="Also show the slots shared by all listed primary profiles.")] = False,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    List availability profiles with their recurring slots in UTC.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        store = _load_store(config, data_file)
        engine = RecurringSlotEngine(default_durations=config.engine.default_durations)

        selected = [
            profile for profile in store.data.profiles
            if not contact_ids or profile.contact_id in contact_ids
        ]

        if not selected:
            console.print("[yellow]No profiles found.[/yellow]")
            return

        table = Table(
            title="Availability profiles",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Contact", style="bold yellow")
        table.add_column("Primary")
        table.add_column("Offset", justify="right")
        table.add_column("Declared")
        table.add_column("UTC slots", style="green")

        for profile in selected:
            declared = "\n".join(
                f"{slot.day.value} {slot.start_time.strftime('%H:%M')}-{slot.end_time.strftime('%H:%M')}"
                for slot in profile.slots
            )
            resolved = "\n".join(
                f"{_weekday_label(slot.day)} {_format_minute(slot.start_minute)}-{_format_minute(slot.end_minute)}"
                f" [{', '.join(str(d) for d in sorted(slot.durations))}]"
                for slot in engine.normalize(profile)
            )
            table.add_row(
                profile.contact_id,
                "✓" if profile.primary else "",
                f"{profile.time_zone_offset:+d}",
                declared or "-",
                resolved or "-",
            )

        console.print()
        console.print(table)

        if common:
            shared = engine.reduce([profile for profile in selected if profile.primary])
            console.print()
            if not shared:
                console.print("[yellow]⚠ No common recurring slot.[/yellow]")
            else:
                console.print("[bold green]Common slots (UTC):[/bold green]")
                for slot in shared:
                    console.print(
                        f"  {_weekday_label(slot.day)} {_format_minute(slot.start_minute)}"
                        f" - {_format_minute(slot.end_minute)}"
                        f" ({', '.join(str(d) for d in sorted(slot.durations))} min)"
                    )
        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]meetcal[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
