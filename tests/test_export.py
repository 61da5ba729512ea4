"""Tests for the grid renderers: terminal rows, Excel and PDF."""

import pytest
from pathlib import Path

from config.defaults import default_rooms, seed_bookings
from models.booking import Booking, BookingStatus, Weekday
from scheduling.grid import ScheduleGrid, build_grid
from export.helpers import (
    COLORS, format_booking_cell, format_time_12h, hex_to_rgb, status_color,
)
from export.tui_renderer import CONTINUATION_MARK, build_day_table, render_day_rows
from export.excel_export import ExcelExporter
from export.pdf_export import PdfExporter


# ─── Test data ────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def seed_grid() -> ScheduleGrid:
    return build_grid(seed_bookings(), default_rooms().rooms)


def _late_booking() -> Booking:
    return Booking(
        id="9", group_name="Robotics", instructor_name="Eng. Esraa",
        day=Weekday.FRIDAY, time_from="21:30", time_to="23:00",
        room_id="B", students_count=6,
    )


# ─── HELPERS ──────────────────────────────────────────────────────────────────

class TestHelpers:

    @pytest.mark.parametrize("slot, expected", [
        ("09:00", "9:00 AM"),
        ("12:00", "12:00 PM"),
        ("13:30", "1:30 PM"),
        ("22:00", "10:00 PM"),
        ("00:30", "12:30 AM"),
    ])
    def test_format_time_12h(self, slot, expected):
        assert format_time_12h(slot) == expected

    def test_hex_to_rgb(self):
        assert hex_to_rgb("1F2937") == (31, 41, 55)
        assert hex_to_rgb("#FFFFFF") == (255, 255, 255)

    def test_booking_cell_text(self):
        regular, extra = seed_bookings()[0], seed_bookings()[1]
        assert format_booking_cell(regular) == "Arduino Code\nEng. Esraa\n8 students"
        text = format_booking_cell(extra, with_time=True)
        assert text.splitlines()[0] == "Web (Extra)"
        assert text.splitlines()[-1] == "10:00-12:00"

    def test_status_color(self):
        regular, extra = seed_bookings()[0], seed_bookings()[1]
        assert status_color(regular) == COLORS["regular"]
        assert status_color(extra) == COLORS["extra"]
        assert extra.status is BookingStatus.EXTRA


# ─── TERMINAL ─────────────────────────────────────────────────────────────────

class TestTuiRenderer:

    def test_row_per_slot(self, seed_grid: ScheduleGrid):
        rows = render_day_rows(seed_grid, Weekday.SATURDAY)
        assert len(rows) == 27
        assert all(len(r) == 5 for r in rows)
        assert rows[0][0] == "9:00 AM"

    def test_anchor_and_continuation(self, seed_grid: ScheduleGrid):
        rows = render_day_rows(seed_grid, Weekday.SATURDAY)
        by_time = {r[0]: r for r in rows}
        assert by_time["10:00 AM"][1].startswith("Arduino Code")
        assert by_time["10:30 AM"][1] == CONTINUATION_MARK
        assert by_time["11:30 AM"][1] == CONTINUATION_MARK
        assert by_time["12:00 PM"][1] == ""
        assert by_time["10:00 AM"][2] == ""

    def test_compact_table_drops_empty_rows(self, seed_grid: ScheduleGrid):
        compact = build_day_table(seed_grid, Weekday.SATURDAY)
        full = build_day_table(seed_grid, Weekday.SATURDAY, compact=False)
        assert compact.row_count == 4
        assert full.row_count == 27
        assert len(full.columns) == 5


# ─── EXCEL ────────────────────────────────────────────────────────────────────

class TestExcelExport:

    def test_creates_file(self, tmp_path: Path, seed_grid: ScheduleGrid):
        out = ExcelExporter(seed_grid).export(tmp_path / "out" / "schedule.xlsx")
        assert out.exists()
        assert out.stat().st_size > 0

    def test_has_correct_sheets(self, tmp_path: Path, seed_grid: ScheduleGrid):
        from openpyxl import load_workbook
        out = ExcelExporter(seed_grid).export(tmp_path / "schedule.xlsx")
        wb = load_workbook(out)
        assert wb.sheetnames == [
            "Overview", "Saturday", "Sunday", "Monday", "Tuesday",
            "Wednesday", "Thursday", "Friday",
        ]

    def test_anchor_cells_are_merged(self, tmp_path: Path, seed_grid: ScheduleGrid):
        from openpyxl import load_workbook
        out = ExcelExporter(seed_grid).export(tmp_path / "schedule.xlsx")
        wb = load_workbook(out)

        saturday = wb["Saturday"]
        assert {str(r) for r in saturday.merged_cells.ranges} == {"B4:B7"}
        assert "Arduino Code" in saturday["B4"].value
        assert saturday["A2"].value == "9:00 AM"
        assert saturday["B1"].value == "Room A"

        thursday = wb["Thursday"]
        assert {str(r) for r in thursday.merged_cells.ranges} == {"E9:E11"}
        assert not list(wb["Friday"].merged_cells.ranges)

    def test_overview_lists_bookings(self, tmp_path: Path, seed_grid: ScheduleGrid):
        from openpyxl import load_workbook
        out = ExcelExporter(seed_grid).export(tmp_path / "schedule.xlsx")
        ws = load_workbook(out)["Overview"]
        groups = [ws.cell(row=r, column=5).value for r in range(2, 6)]
        assert groups == ["Arduino Code", "Web", "Spike", "Arduino Block"]

    def test_merge_clamped_at_last_slot(self, tmp_path: Path):
        from openpyxl import load_workbook
        grid = build_grid([_late_booking()], default_rooms().rooms)
        out = ExcelExporter(grid).export(tmp_path / "late.xlsx")
        ws = load_workbook(out)["Friday"]
        # 21:30 is row 27, 22:00 (last slot) row 28
        assert {str(r) for r in ws.merged_cells.ranges} == {"C27:C28"}


# ─── PDF ──────────────────────────────────────────────────────────────────────

class TestPdfExport:

    def test_creates_pdf(self, tmp_path: Path, seed_grid: ScheduleGrid):
        out = PdfExporter(seed_grid).export(tmp_path / "out" / "schedule.pdf")
        assert out.exists()
        assert out.read_bytes()[:4] == b"%PDF"

    def test_skip_empty_days(self, tmp_path: Path, seed_grid: ScheduleGrid):
        full = PdfExporter(seed_grid).export(tmp_path / "full.pdf")
        short = PdfExporter(seed_grid).export(tmp_path / "short.pdf", skip_empty_days=True)
        assert short.read_bytes()[:4] == b"%PDF"
        assert short.stat().st_size < full.stat().st_size

    def test_empty_grid_still_valid(self, tmp_path: Path):
        grid = build_grid([], default_rooms().rooms)
        out = PdfExporter(grid).export(tmp_path / "empty.pdf", skip_empty_days=True)
        assert out.read_bytes()[:4] == b"%PDF"

    def test_late_booking_renders(self, tmp_path: Path):
        grid = build_grid([_late_booking()], default_rooms().rooms)
        out = PdfExporter(grid, title="Late – Schedule").export(tmp_path / "late.pdf")
        assert out.read_bytes()[:4] == b"%PDF"
