"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.yaml_repository import YamlScheduleRepository
from ..config import AppConfig, get_default_config_path
from ..domain.cancellation import get_appointment_cancellation_status
from ..domain.dates import business_now, get_minutes_until_appointment
from ..domain.exceptions import BarberSlotsError
from ..domain.slot_generator import generate_time_slots
from ..services.availability import AvailabilityService
from ..services.financial import FinancialService

app = typer.Typer(
    name="barberslots",
    help="Compute bookable barbershop slots and occupancy reports",
    add_completion=False
)

console = Console()

REASON_MESSAGES = {
    "SHOP_CLOSED": "The shop is closed at this time.",
    "BARBER_UNAVAILABLE": "The barber is not available at this time.",
    "SLOT_UNAVAILABLE": "This time is not a valid slot for the service.",
    "SLOT_IN_PAST": "This time has already passed.",
    "SLOT_OCCUPIED": "This time is already booked.",
}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


def _load(config_file: Optional[Path]) -> tuple[AppConfig, YamlScheduleRepository]:
    """Load config, set up logging and open the schedule data file."""
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)

    logging.basicConfig(
        level=config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    repository = YamlScheduleRepository.from_file(config.resolve_data_file(config_path))
    return config, repository


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    barber: Annotated[str, typer.Argument(help="Barber id")],
    service: Annotated[str, typer.Argument(help="Service id")],
    config_file: ConfigOption = None,
    show_all: Annotated[bool, typer.Option("--all", help="Also list unavailable slots.")] = False,
):
    """
    List the slots a client can book for a barber and service on a date.

    Examples:

        barberslots slots 2025-03-10 joao corte

        barberslots slots 2025-03-10 joao barba --all
    """
    try:
        _, repository = _load(config_file)
        service_layer = AvailabilityService(repository)

        result = asyncio.run(
            service_layer.get_available_slots(date=date, barber_id=barber, service_id=service)
        )

        visible = result if show_all else [slot for slot in result if slot.available]
        if not visible:
            console.print(f"[yellow]⚠ No available slots for {barber} on {date}.[/yellow]")
            return

        table = Table(title=f"Slots {date} - {barber} / {service}", show_header=True, header_style="bold cyan")
        table.add_column("Time", style="bold yellow")
        table.add_column("Available")
        for slot in visible:
            table.add_row(slot.time, "[green]yes[/green]" if slot.available else "[red]no[/red]")

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, BarberSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def grid(
    start_time: Annotated[str, typer.Argument(help="Window start (HH:MM)")],
    end_time: Annotated[str, typer.Argument(help="Window end (HH:MM)")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Slot duration in minutes")] = None,
    break_start: Annotated[Optional[str], typer.Option("--break-start", help="Break start (HH:MM)")] = None,
    break_end: Annotated[Optional[str], typer.Option("--break-end", help="Break end (HH:MM)")] = None,
    config_file: ConfigOption = None,
):
    """
    Preview the slot grid a working-hours template produces.

    Examples:

        barberslots grid 09:00 18:00 --break-start 12:00 --break-end 13:00

        barberslots grid 11:00 14:00 -d 60
    """
    try:
        config = AppConfig.load_from_yaml(config_file or get_default_config_path())

        slot_duration = duration if duration is not None else config.defaults.duration_minutes
        preview = generate_time_slots(
            start_time=start_time,
            end_time=end_time,
            duration=slot_duration,
            break_start=break_start,
            break_end=break_end,
        )

    except (FileNotFoundError, ValueError, BarberSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not preview:
        console.print("[yellow]⚠ This window produces no slots.[/yellow]")
        return

    console.print(f"[bold green]✓ {len(preview)} slot(s) of {slot_duration} min:[/bold green]")
    console.print("  " + "  ".join(slot.time for slot in preview))


@app.command()
def check(
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    barber: Annotated[str, typer.Argument(help="Barber id")],
    service: Annotated[str, typer.Argument(help="Service id")],
    start_time: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    config_file: ConfigOption = None,
):
    """
    Validate a single proposed booking. Exits with status 2 when it is rejected.
    """
    try:
        _, repository = _load(config_file)
        service_layer = AvailabilityService(repository)

        reason = asyncio.run(
            service_layer.check_booking(
                date=date,
                barber_id=barber,
                service_id=service,
                start_time=start_time,
            )
        )

    except (FileNotFoundError, ValueError, BarberSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if reason is None:
        console.print(f"[green]✓ {date} {start_time} can be booked with {barber}.[/green]")
        return

    console.print(f"[bold red]✗ {reason.value}:[/bold red] {REASON_MESSAGES[reason.value]}")
    raise typer.Exit(2)


@app.command()
def occupancy(
    month: Annotated[int, typer.Option("--month", "-m", min=1, max=12, help="Month (1-12)")],
    year: Annotated[int, typer.Option("--year", "-y", min=2020, max=2100, help="Year")],
    barber: Annotated[Optional[str], typer.Option("--barber", "-b", help="Barber id. Defaults to all barbers")] = None,
    config_file: ConfigOption = None,
):
    """
    Show the monthly financial and occupancy report.
    """
    try:
        _, repository = _load(config_file)
        stats = asyncio.run(FinancialService(repository).get_stats(month=month, year=year, barber_id=barber))

    except (FileNotFoundError, ValueError, BarberSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    occupancy_stats = stats.occupancy
    console.print(Panel.fit(
        f"[bold]Revenue:[/bold] R$ {stats.total_revenue:.2f}\n"
        f"[bold]Appointments:[/bold] {stats.total_appointments}\n"
        f"[bold]Average ticket:[/bold] R$ {stats.average_ticket:.2f}\n"
        f"[bold]Unique clients:[/bold] {stats.unique_clients}\n\n"
        f"[bold]Available hours:[/bold] {occupancy_stats.available_hours}\n"
        f"[bold]Worked hours:[/bold] {occupancy_stats.worked_hours}\n"
        f"[bold]Idle hours:[/bold] {occupancy_stats.idle_hours}\n"
        f"[bold]Closed hours:[/bold] {occupancy_stats.closed_hours}\n"
        f"[bold]Occupancy:[/bold] {occupancy_stats.occupancy_rate}%",
        title=f"{year}-{month:02d} - {barber or 'all barbers'}"
    ))

    if stats.service_breakdown:
        table = Table(title="Services", show_header=True, header_style="bold cyan")
        table.add_column("Service", style="bold yellow")
        table.add_column("Count", justify="right")
        table.add_column("Revenue", justify="right")
        for entry in stats.service_breakdown:
            table.add_row(entry.name, str(entry.count), f"R$ {entry.revenue:.2f}")
        console.print(table)


@app.command()
def cancellation(
    date: Annotated[str, typer.Argument(help="Appointment date (YYYY-MM-DD)")],
    start_time: Annotated[str, typer.Argument(help="Appointment start time (HH:MM)")],
    config_file: ConfigOption = None,
):
    """
    Tell whether a client may still cancel an appointment.
    """
    try:
        config = AppConfig.load_from_yaml(config_file or get_default_config_path())

        now = business_now()
        minutes = get_minutes_until_appointment(date, start_time, now=now)
        status = get_appointment_cancellation_status(minutes, config.defaults.cancellation_window_minutes)

    except (FileNotFoundError, ValueError, BarberSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"Now: {now.format('YYYY-MM-DD HH:mm')} ({config.timezone})")
    console.print(f"Minutes until appointment: {minutes}")
    if status.can_cancel:
        console.print("[green]✓ The client can cancel.[/green]")
    elif status.is_blocked:
        console.print("[yellow]⚠ Inside the cancellation window; only the barber can cancel.[/yellow]")
    else:
        console.print("[red]✗ The appointment has already started.[/red]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
