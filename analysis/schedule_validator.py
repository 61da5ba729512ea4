"""Integrity check of a stored booking collection.

The store only lets conflict-free, well-formed bookings in, but the saved
blob can be edited or produced by an older version. This check runs
independently of the store and reports what it finds.
"""

from collections import defaultdict
from typing import Iterable, Literal

from pydantic import BaseModel

from config.schema import AppConfig
from models.booking import Booking
from scheduling.conflicts import overlaps
from scheduling.grid import time_slots


class ValidationViolation(BaseModel):
    """A single problem in the booking collection."""

    severity: Literal["error", "warning"]
    constraint: str      # e.g. "room_double_booking"
    description: str
    entity: str          # booking id


class ValidationReport(BaseModel):
    """Result of the integrity check."""

    violations: list[ValidationViolation]
    is_valid: bool       # True if there are no errors (warnings are ok)

    @property
    def errors(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def print_rich(self) -> None:
        """Prints the report with Rich."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ VALID[/bold green]"
            if self.is_valid
            else "[bold red]✗ PROBLEMS FOUND[/bold red]"
        )
        lines = [status, f"Errors: {len(self.errors)} | Warnings: {len(self.warnings)}"]
        console.print(Panel("\n".join(lines), title="Booking check", border_style="cyan"))

        if not self.violations:
            console.print("[dim]No problems found.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Type", width=8)
        table.add_column("Check", width=24)
        table.add_column("Booking", width=14)
        table.add_column("Description")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class ScheduleValidator:
    """Checks a booking collection against the configured rooms and grid."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def validate(self, bookings: Iterable[Booking]) -> ValidationReport:
        bookings = list(bookings)
        violations: list[ValidationViolation] = []

        violations.extend(self._check_time_order(bookings))
        violations.extend(self._check_room_double_booking(bookings))
        violations.extend(self._check_unknown_rooms(bookings))
        violations.extend(self._check_grid_alignment(bookings))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Individual checks ─────────────────────────────────────────────────────

    def _check_time_order(self, bookings: list[Booking]) -> list[ValidationViolation]:
        """Start must lie before end."""
        return [
            ValidationViolation(
                severity="error",
                constraint="time_order",
                entity=b.id,
                description=f"{b.time_from}-{b.time_to}: start is not before end.",
            )
            for b in bookings
            if b.start_minutes >= b.end_minutes
        ]

    def _check_room_double_booking(
        self, bookings: list[Booking]
    ) -> list[ValidationViolation]:
        """No two bookings may overlap in the same room on the same day."""
        violations: list[ValidationViolation] = []
        by_room_day: dict[tuple, list[Booking]] = defaultdict(list)
        for b in bookings:
            by_room_day[(b.room_id, b.day)].append(b)

        for (room_id, day), group in by_room_day.items():
            for i, a in enumerate(group):
                for b in group[i + 1:]:
                    if overlaps(a.start_minutes, a.end_minutes,
                                b.start_minutes, b.end_minutes):
                        violations.append(ValidationViolation(
                            severity="error",
                            constraint="room_double_booking",
                            entity=b.id,
                            description=(
                                f"{day.value}, room {room_id}: "
                                f"{b.time_from}-{b.time_to} overlaps booking "
                                f"{a.id} ({a.time_from}-{a.time_to})."
                            ),
                        ))
        return violations

    def _check_unknown_rooms(self, bookings: list[Booking]) -> list[ValidationViolation]:
        """Every booking must reference a configured room."""
        known = set(self.config.rooms.room_ids)
        return [
            ValidationViolation(
                severity="error",
                constraint="unknown_room",
                entity=b.id,
                description=f"Room '{b.room_id}' is not configured.",
            )
            for b in bookings
            if b.room_id not in known
        ]

    def _check_grid_alignment(self, bookings: list[Booking]) -> list[ValidationViolation]:
        """Bookings that the weekly grid cannot show."""
        grid = self.config.grid
        slots = set(time_slots(grid.slot_minutes, grid.start_hour, grid.end_hour))
        return [
            ValidationViolation(
                severity="warning",
                constraint="off_grid",
                entity=b.id,
                description=(
                    f"Start {b.time_from} is not a grid slot "
                    f"({grid.start_hour:02d}:00-{grid.end_hour:02d}:00, "
                    f"every {grid.slot_minutes} min); not shown in the weekly view."
                ),
            )
            for b in bookings
            if b.time_from not in slots
        ]
