"""Terminal rendering of the weekly grid (Rich).

Rich tables have no row spans: the anchor row carries the booking text and
the rows it covers show a vertical bar instead of being left blank.
"""

from typing import TYPE_CHECKING

from export.helpers import RICH_STYLES, format_booking_cell, format_time_12h

if TYPE_CHECKING:
    from models.booking import Weekday
    from rich.table import Table
    from scheduling.grid import ScheduleGrid

CONTINUATION_MARK = "│"


def render_day_rows(grid: "ScheduleGrid", day: "Weekday") -> list[list[str]]:
    """Returns table rows for one day.

    Each row: [time_label, room_1, room_2, ...]
    """
    rows: list[list[str]] = []
    for slot in grid.slots:
        cells = [format_time_12h(slot)]
        for cell in grid.row(day, slot):
            if cell.is_anchor:
                cells.append(format_booking_cell(cell.booking, with_time=True))
            elif cell.is_continuation:
                cells.append(CONTINUATION_MARK)
            else:
                cells.append("")
        rows.append(cells)
    return rows


def build_day_table(grid: "ScheduleGrid", day: "Weekday", compact: bool = True) -> "Table":
    """Rich table for one day. compact drops rows that are empty in every room."""
    from rich.table import Table
    from rich.text import Text
    from rich import box

    table = Table(title=day.value, box=box.ROUNDED, show_lines=False)
    table.add_column("Time", style="dim", no_wrap=True)
    for room in grid.rooms:
        table.add_column(room.name, justify="center", min_width=14)

    for slot, row in zip(grid.slots, render_day_rows(grid, day)):
        cells = grid.row(day, slot)
        if compact and all(c.is_empty for c in cells):
            continue
        rendered: list = [row[0]]
        for cell, text in zip(cells, row[1:]):
            booking = cell.booking
            if booking is not None:
                rendered.append(Text(text, style=RICH_STYLES[booking.status]))
            else:
                rendered.append(text)
        table.add_row(*rendered)
    return table
