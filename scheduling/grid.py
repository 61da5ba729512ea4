"""Weekly occupancy grid: day × time slot × room.

A booking occupies one ANCHOR cell at its start slot, carrying the booking
and its span in slots, plus CONTINUATION cells for the remaining slots of
its span. Consumers draw an anchor once, stretched over ``span`` rows, and
skip continuation cells. Empty cells are drawn blank.

The grid is derived data: it is rebuilt from scratch whenever the bookings
or rooms change.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from models.booking import DAYS, Booking, Weekday, format_minutes
from models.room import Room

logger = logging.getLogger(__name__)

DEFAULT_SLOT_MINUTES = 30
DEFAULT_START_HOUR = 9
DEFAULT_END_HOUR = 22


class CellKind(str, Enum):
    EMPTY = "empty"
    ANCHOR = "anchor"
    CONTINUATION = "continuation"


@dataclass(frozen=True)
class GridCell:
    """State of one (day, slot, room) cell."""

    kind: CellKind = CellKind.EMPTY
    booking: Optional[Booking] = None   # set for ANCHOR and CONTINUATION
    span: int = 0                       # rows covered; only set for ANCHOR

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    @property
    def is_anchor(self) -> bool:
        return self.kind is CellKind.ANCHOR

    @property
    def is_continuation(self) -> bool:
        return self.kind is CellKind.CONTINUATION


EMPTY_CELL = GridCell()


@dataclass
class ScheduleGrid:
    """Result of build_grid().

    cells[day][slot][room_id] -> GridCell
    """

    days: list[Weekday]
    slots: list[str]
    rooms: list[Room]
    slot_minutes: int
    cells: dict[Weekday, dict[str, dict[str, GridCell]]] = field(default_factory=dict)

    def cell(self, day: Weekday, slot: str, room_id: str) -> GridCell:
        return self.cells[Weekday(day)][slot][room_id]

    def row(self, day: Weekday, slot: str) -> list[GridCell]:
        """Cells of one time slot in room order."""
        by_room = self.cells[Weekday(day)][slot]
        return [by_room[r.id] for r in self.rooms]

    def anchors(self, day: Optional[Weekday] = None) -> list[tuple[Weekday, str, str, GridCell]]:
        """All anchor cells as (day, slot, room_id, cell), in grid order."""
        days = [Weekday(day)] if day is not None else self.days
        out = []
        for d in days:
            for slot in self.slots:
                for room in self.rooms:
                    c = self.cells[d][slot][room.id]
                    if c.is_anchor:
                        out.append((d, slot, room.id, c))
        return out

    def is_day_empty(self, day: Weekday) -> bool:
        return not self.anchors(day)

    def visible_span(self, slot: str, cell: GridCell) -> int:
        """Anchor span clamped to the rows left below ``slot``."""
        return min(cell.span, len(self.slots) - self.slots.index(slot))


def time_slots(
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
    start_hour: int = DEFAULT_START_HOUR,
    end_hour: int = DEFAULT_END_HOUR,
) -> list[str]:
    """Slot labels from start_hour:00 to end_hour:00 inclusive.

    >>> len(time_slots())
    27
    """
    if slot_minutes <= 0:
        raise ValueError("slot_minutes must be positive")
    if start_hour > end_hour:
        raise ValueError("start_hour must not be after end_hour")
    return [
        format_minutes(m)
        for m in range(start_hour * 60, end_hour * 60 + 1, slot_minutes)
    ]


def build_grid(
    bookings: Iterable[Booking],
    rooms: Iterable[Room],
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
    start_hour: int = DEFAULT_START_HOUR,
    end_hour: int = DEFAULT_END_HOUR,
) -> ScheduleGrid:
    """Lays the bookings out on the weekly grid.

    Skipped without error:
    - bookings whose end is not after their start
    - bookings whose start time is not exactly on a slot
    - bookings for rooms outside ``rooms``

    Continuation cells stop at the last slot; the anchor keeps the full span
    (see ScheduleGrid.visible_span). Later bookings overwrite earlier ones
    where (malformed) data overlaps.
    """
    rooms = list(rooms)
    slots = time_slots(slot_minutes, start_hour, end_hour)
    slot_index = {s: i for i, s in enumerate(slots)}
    room_ids = {r.id for r in rooms}

    grid = ScheduleGrid(
        days=list(DAYS),
        slots=slots,
        rooms=rooms,
        slot_minutes=slot_minutes,
    )
    for day in DAYS:
        grid.cells[day] = {
            slot: {r.id: EMPTY_CELL for r in rooms} for slot in slots
        }

    for booking in bookings:
        start = booking.start_minutes
        end = booking.end_minutes
        if end <= start:
            logger.debug(f"Grid: skipping {booking.id}, end {booking.time_to} not after start")
            continue
        if booking.room_id not in room_ids:
            logger.debug(f"Grid: skipping {booking.id}, unknown room {booking.room_id}")
            continue

        start_idx = slot_index.get(format_minutes(start))
        if start_idx is None:
            logger.debug(f"Grid: skipping {booking.id}, {booking.time_from} is not on the grid")
            continue

        span = math.ceil((end - start) / slot_minutes)
        day_cells = grid.cells[booking.day]
        day_cells[slots[start_idx]][booking.room_id] = GridCell(
            kind=CellKind.ANCHOR, booking=booking, span=span,
        )
        for idx in range(start_idx + 1, min(start_idx + span, len(slots))):
            day_cells[slots[idx]][booking.room_id] = GridCell(
                kind=CellKind.CONTINUATION, booking=booking,
            )

    return grid
