"""Excel export of the weekly grid (openpyxl)."""

from pathlib import Path
from typing import Optional

from models.booking import Booking, Weekday
from scheduling.grid import ScheduleGrid

from export.helpers import (
    COLORS, format_booking_cell, format_time_12h, status_color, today_str,
)


class ExcelExporter:
    """Writes one sheet per weekday plus an overview sheet.

    Each anchor cell is merged over the rows its booking spans, continuation
    cells are covered by that merge.
    """

    # Column widths (Excel units)
    COL_TIME_W = 12
    COL_ROOM_W = 24

    # Row heights (points)
    ROW_HEADER_H = 22
    ROW_SLOT_H = 18

    HEADER_ROW = 1
    FIRST_SLOT_ROW = 2

    def __init__(self, grid: ScheduleGrid, title: str = "Weekly Schedule"):
        self.grid = grid
        self.title = title

    # ─── Public API ───────────────────────────────────────────────────────────

    def export(self, output_path: Path, bookings: Optional[list[Booking]] = None) -> Path:
        """Creates the workbook.

        bookings: optional list for the overview sheet; defaults to the
        bookings visible on the grid.
        """
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)

        if bookings is None:
            bookings = [cell.booking for _, _, _, cell in self.grid.anchors()]
        self._sheet_overview(wb, bookings)

        for day in self.grid.days:
            self._sheet_day(wb, day)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        return output_path

    def slot_row(self, slot: str) -> int:
        """Worksheet row of a time slot."""
        return self.FIRST_SLOT_ROW + self.grid.slots.index(slot)

    # ─── Style helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = True):
        from openpyxl.styles import Alignment
        return Alignment(horizontal="center", vertical="center", wrap_text=wrap)

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _header_row(self, ws, labels: list[str]) -> None:
        from openpyxl.styles import Font
        for col, label in enumerate(labels, start=1):
            cell = ws.cell(row=self.HEADER_ROW, column=col, value=label)
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.fill = self._fill(COLORS["header"])
            cell.alignment = self._center_align(wrap=False)
            cell.border = self._thin_border()
        ws.row_dimensions[self.HEADER_ROW].height = self.ROW_HEADER_H

    # ─── Sheets ───────────────────────────────────────────────────────────────

    def _sheet_overview(self, wb, bookings: list[Booking]) -> None:
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter

        ws = wb.create_sheet("Overview")
        labels = ["Day", "From", "To", "Room", "Group", "Instructor", "Students", "Status"]
        self._header_row(ws, labels)
        for i, w in enumerate([12, 8, 8, 10, 24, 24, 10, 10], start=1):
            ws.column_dimensions[get_column_letter(i)].width = w

        room_names = {r.id: r.name for r in self.grid.rooms}
        for row, b in enumerate(bookings, start=self.HEADER_ROW + 1):
            values = [
                b.day.value, b.time_from, b.time_to,
                room_names.get(b.room_id, b.room_id),
                b.group_name, b.instructor_name, b.students_count, b.status.value,
            ]
            for col, value in enumerate(values, start=1):
                c = ws.cell(row=row, column=col, value=value)
                c.border = self._thin_border()
                c.font = Font(size=9)
            ws.cell(row=row, column=len(labels)).fill = self._fill(status_color(b))

        footer_row = self.HEADER_ROW + len(bookings) + 2
        ws.cell(row=footer_row, column=1, value=f"{self.title} - {today_str()}").font = Font(
            italic=True, size=8)
        ws.freeze_panes = "A2"

    def _sheet_day(self, wb, day: Weekday) -> None:
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter

        ws = wb.create_sheet(day.value)
        self._header_row(ws, ["Time"] + [r.name for r in self.grid.rooms])
        ws.column_dimensions["A"].width = self.COL_TIME_W
        for col in range(2, len(self.grid.rooms) + 2):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_ROOM_W

        # Cells already inside a merged anchor range (only overlapping data gets here)
        covered: set[tuple[int, int]] = set()

        for slot in self.grid.slots:
            row = self.slot_row(slot)
            ws.row_dimensions[row].height = self.ROW_SLOT_H
            t = ws.cell(row=row, column=1, value=format_time_12h(slot))
            t.font = Font(bold=True, size=8)
            t.fill = self._fill(COLORS["time"])
            t.border = self._thin_border()

            for col, cell in enumerate(self.grid.row(day, slot), start=2):
                if cell.is_continuation or (row, col) in covered:
                    continue
                c = ws.cell(row=row, column=col)
                c.border = self._thin_border()
                if cell.is_empty:
                    continue

                c.value = format_booking_cell(cell.booking, with_time=True)
                c.font = Font(size=8, bold=False)
                c.fill = self._fill(status_color(cell.booking))
                c.alignment = self._center_align()
                span = self.grid.visible_span(slot, cell)
                if span > 1:
                    ws.merge_cells(
                        start_row=row, start_column=col,
                        end_row=row + span - 1, end_column=col,
                    )
                    covered.update((r, col) for r in range(row + 1, row + span))

        ws.freeze_panes = "B2"
