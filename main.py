"""Room booking scheduler - main CLI.

Usage:
  python main.py list                       List all bookings
  python main.py add --group ... --day ...  Add a booking
  python main.py edit <id> --to 13:00       Change fields of a booking
  python main.py delete <id>                Delete a booking (asks first)
  python main.py show [--day Monday]        Weekly grid in the terminal
  python main.py export --excel x.xlsx      Export the weekly grid
  python main.py validate                   Check the stored bookings
  python main.py config show                Show the configuration
  python main.py config init                Write the default configuration
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

DAY_CHOICES = ["Saturday", "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
STATUS_CHOICES = ["Regular", "Extra"]
CONFIRM_DELETE = "Are you sure you want to delete this booking?"


def _config_manager(ctx: click.Context):
    from config.manager import ConfigManager
    return ConfigManager(ctx.obj.get("config_path"))


def _load_config_or_abort(ctx: click.Context):
    """Loads the configuration (defaults on first run) or aborts with a message."""
    mgr = _config_manager(ctx)
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    data_dir = ctx.obj.get("data_dir")
    if data_dir:
        config = config.model_copy(update={
            "storage": config.storage.model_copy(update={"data_dir": data_dir}),
        })
    return mgr, config


def _service_or_abort(ctx: click.Context):
    from scheduling.errors import PersistenceReadError
    from scheduling.service import BookingService

    _, config = _load_config_or_abort(ctx)
    try:
        return BookingService.from_config(config)
    except PersistenceReadError as e:
        console.print(
            f"[red bold]Saved bookings cannot be read:[/red bold]\n{e}\n"
            "Fix or remove the file, or set storage.on_corrupt_state to 'seed'."
        )
        sys.exit(1)


def _print_result(result) -> None:
    if result.success:
        console.print(f"[green]✓[/green] {result.message}")
        if result.booking is not None:
            console.print(f"  [dim]id {result.booking.id}: {result.booking.describe()}[/dim]")
    else:
        console.print(f"[red]✗ {result.message}[/red]")
        sys.exit(1)


def _write_or_abort(action):
    """Runs a store mutation, turning write failures into an exit code."""
    from scheduling.errors import PersistenceWriteError
    try:
        return action()
    except PersistenceWriteError as e:
        console.print(f"[red bold]Saving failed, nothing was changed:[/red bold] {e}")
        sys.exit(1)


# ─── LIST ─────────────────────────────────────────────────────────────────────

@click.command("list")
@click.pass_context
def cmd_list(ctx: click.Context):
    """Lists all bookings in week order."""
    service = _service_or_abort(ctx)
    bookings = service.list_bookings()

    if not bookings:
        console.print("[dim]There are no bookings yet.[/dim]")
        console.print("[dim]Add the first booking with: python main.py add[/dim]")
        return

    room_names = {r.id: r.name for r in service.config.rooms.rooms}
    table = Table(title="Bookings", box=box.ROUNDED)
    table.add_column("Id", style="dim")
    table.add_column("Day")
    table.add_column("Time")
    table.add_column("Room")
    table.add_column("Group", style="bold")
    table.add_column("Instructor")
    table.add_column("Students", justify="right")
    table.add_column("Status")
    for b in bookings:
        status_style = "red" if b.status.value == "Extra" else "sky_blue1"
        table.add_row(
            b.id, b.day.value, f"{b.time_from}–{b.time_to}",
            room_names.get(b.room_id, b.room_id), b.group_name, b.instructor_name,
            str(b.students_count), f"[{status_style}]{b.status.value}[/{status_style}]",
        )
    console.print(table)


# ─── ADD / EDIT / DELETE ──────────────────────────────────────────────────────

def _booking_options(required: bool):
    """Shared options of add and edit. For edit every option is optional."""
    def decorator(f):
        options = [
            click.option("--group", "group_name", required=required, help="Group name."),
            click.option("--instructor", "instructor_name", required=required,
                         help="Instructor name."),
            click.option("--day", type=click.Choice(DAY_CHOICES, case_sensitive=False),
                         required=required, help="Weekday."),
            click.option("--room", "room_id", required=required, help="Room id, e.g. A."),
            click.option("--from", "time_from", required=required, help="Start time HH:MM."),
            click.option("--to", "time_to", required=required, help="End time HH:MM."),
            click.option("--students", "students_count", type=int, required=required,
                         help="Number of students (at least 1)."),
            click.option("--status", type=click.Choice(STATUS_CHOICES, case_sensitive=False),
                         default=None, help="Regular (default) or Extra."),
        ]
        for option in reversed(options):
            f = option(f)
        return f
    return decorator


def _form_data(**fields) -> dict:
    data = {k: v for k, v in fields.items() if v is not None}
    if "day" in data:
        data["day"] = data["day"].capitalize()
    if "status" in data:
        data["status"] = data["status"].capitalize()
    return data


@click.command("add")
@_booking_options(required=True)
@click.pass_context
def cmd_add(ctx: click.Context, **fields):
    """Adds a booking if the room is free at that time."""
    service = _service_or_abort(ctx)
    result = _write_or_abort(lambda: service.add_booking(_form_data(**fields)))
    _print_result(result)


@click.command("edit")
@click.argument("booking_id")
@_booking_options(required=False)
@click.pass_context
def cmd_edit(ctx: click.Context, booking_id: str, **fields):
    """Changes fields of an existing booking. The id stays the same."""
    service = _service_or_abort(ctx)
    data = _form_data(**fields)
    if not data:
        console.print("[yellow]Nothing to change.[/yellow]")
        return
    result = _write_or_abort(lambda: service.update_booking(booking_id, data))
    _print_result(result)


@click.command("delete")
@click.argument("booking_id")
@click.option("--yes", "-y", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.pass_context
def cmd_delete(ctx: click.Context, booking_id: str, yes: bool):
    """Deletes a booking after confirmation."""
    service = _service_or_abort(ctx)
    booking = service.get_booking(booking_id)
    if booking is None:
        console.print(f"[dim]No booking with id {booking_id}, nothing deleted.[/dim]")
        return

    console.print(f"{booking.id}: {booking.describe()}")
    if not yes and not click.confirm(CONFIRM_DELETE, default=False):
        console.print("[yellow]Cancelled.[/yellow]")
        return
    _write_or_abort(lambda: service.delete_booking(booking_id))
    console.print("[green]✓[/green] Booking deleted.")


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.command("show")
@click.option("--day", type=click.Choice(DAY_CHOICES, case_sensitive=False), default=None,
              help="Only this weekday.")
@click.option("--full", is_flag=True, default=False, help="Also print empty time rows.")
@click.pass_context
def cmd_show(ctx: click.Context, day, full: bool):
    """Shows the weekly occupancy grid."""
    from export.tui_renderer import build_day_table
    from models.booking import Weekday

    service = _service_or_abort(ctx)
    grid = service.build_grid()
    console.print(Panel(f"[bold]{service.config.app_name}[/bold]", border_style="cyan"))

    days = [Weekday(day.capitalize())] if day else grid.days
    shown = 0
    for d in days:
        if grid.is_day_empty(d) and not day:
            continue
        console.print(build_day_table(grid, d, compact=not full))
        shown += 1
    if shown == 0:
        console.print("[dim]There are no bookings yet.[/dim]")


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.option("--excel", "excel_path", type=click.Path(path_type=Path), default=None,
              help="Write the weekly grid as .xlsx.")
@click.option("--pdf", "pdf_path", type=click.Path(path_type=Path), default=None,
              help="Write the weekly grid as .pdf.")
@click.option("--skip-empty-days", is_flag=True, default=False,
              help="PDF: leave out days without bookings.")
@click.pass_context
def cmd_export(ctx: click.Context, excel_path, pdf_path, skip_empty_days: bool):
    """Exports the weekly grid as Excel and/or PDF."""
    if excel_path is None and pdf_path is None:
        excel_path = Path("output/schedule.xlsx")
        pdf_path = Path("output/schedule.pdf")

    service = _service_or_abort(ctx)
    grid = service.build_grid()
    title = service.config.app_name

    if excel_path is not None:
        from export.excel_export import ExcelExporter
        ExcelExporter(grid, title).export(excel_path, bookings=service.list_bookings())
        console.print(f"[green]✓[/green] Excel saved: {excel_path}")
    if pdf_path is not None:
        from export.pdf_export import PdfExporter
        PdfExporter(grid, title).export(pdf_path, skip_empty_days=skip_empty_days)
        console.print(f"[green]✓[/green] PDF saved: {pdf_path}")


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.pass_context
def cmd_validate(ctx: click.Context):
    """Checks the stored bookings for overlaps, unknown rooms and off-grid times."""
    from analysis.schedule_validator import ScheduleValidator

    service = _service_or_abort(ctx)
    if service.store.seeded:
        console.print("[dim]No saved bookings found, checking the example bookings.[/dim]")
    report = ScheduleValidator(service.config).validate(service.list_bookings())
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Show or create the configuration."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Shows the active configuration."""
    mgr, config = _load_config_or_abort(ctx)
    source = "defaults" if mgr.first_run_check() else str(mgr.DEFAULT_CONFIG)
    console.print(Panel(
        f"[bold]{config.app_name}[/bold]  |  source: {source}",
        title="Configuration",
        border_style="cyan",
    ))

    table = Table(title="Rooms", box=box.ROUNDED)
    table.add_column("Id", style="bold")
    table.add_column("Name")
    for room in config.rooms.rooms:
        table.add_row(room.id, room.name)
    console.print(table)

    g = config.grid
    console.print(
        f"[bold]Grid:[/bold] {g.start_hour:02d}:00–{g.end_hour:02d}:00, "
        f"every {g.slot_minutes} min"
    )
    s = config.storage
    console.print(
        f"[bold]Storage:[/bold] {Path(s.data_dir) / (s.key + '.json')} | "
        f"unreadable state: {s.on_corrupt_state}"
    )


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing file.")
@click.pass_context
def config_init(ctx: click.Context, force: bool):
    """Writes the default configuration file."""
    from config.defaults import default_app_config

    mgr = _config_manager(ctx)
    if not mgr.first_run_check() and not force:
        console.print(
            f"[yellow]{mgr.DEFAULT_CONFIG} already exists.[/yellow] Use --force to overwrite."
        )
        return
    path = mgr.save(default_app_config())
    console.print(f"[green]✓[/green] Configuration written: {path}")


# ─── MAIN CLI ─────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Path of the YAML configuration.")
@click.option("--data-dir", default=None, help="Directory of the saved bookings.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
@click.pass_context
def cli(ctx: click.Context, config_path, data_dir, verbose: bool):
    """Room booking scheduler: bookings, conflict check and weekly grid."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["data_dir"] = data_dir


cli.add_command(cmd_list)
cli.add_command(cmd_add)
cli.add_command(cmd_edit)
cli.add_command(cmd_delete)
cli.add_command(cmd_show)
cli.add_command(cmd_export)
cli.add_command(cmd_validate)
cli.add_command(cmd_config)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
