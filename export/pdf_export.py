"""PDF export of the weekly grid (fpdf2)."""

from pathlib import Path

from models.booking import Weekday
from scheduling.grid import ScheduleGrid

from export.helpers import (
    COLORS, hex_to_rgb, format_booking_cell, format_time_12h, status_color, today_str,
)


def _pdf_safe(text: str) -> str:
    """Replaces characters the fpdf2 built-in fonts (latin-1) cannot show."""
    text = (
        text
        .replace("—", " - ")   # em dash
        .replace("–", "-")      # en dash
        .replace("│", "|")      # box drawings light vertical
    )
    return text.encode("latin-1", "replace").decode("latin-1")


# ─── A4 landscape dimensions ──────────────────────────────────────────────────
# Landscape A4: 297 × 210 mm, usable width with 10 mm margins: 277 mm
# Columns: time (22) + rooms share the rest

_PAGE_W = 297
_MARGIN = 10
_TOP = 22
_BOTTOM = 18
_COL_TIME_W = 22
_ROW_HEADER_H = 7    # mm
_MAX_ROW_H = 8       # mm per slot
_FONT_HEADER = 8     # pt
_FONT_CONTENT = 7    # pt
_FONT_TINY = 6       # pt
_LINE_H = 3.2        # mm per line at 7pt


class _SchedulePdf:
    """Thin wrapper around fpdf.FPDF for schedule pages."""

    def __init__(self, title: str):
        from fpdf import FPDF

        class _Pdf(FPDF):
            def __init__(inner, t):
                super().__init__(orientation="L", unit="mm", format="A4")
                inner._doc_title = t
                inner._page_title = ""
                inner.set_auto_page_break(auto=False)
                inner.set_margins(left=_MARGIN, top=_TOP, right=_MARGIN)

            def header(inner):
                inner.set_font("Helvetica", "B", 11)
                inner.set_xy(_MARGIN, 8)
                inner.cell(150, 7, _pdf_safe(inner._doc_title), border=0, align="L")
                inner.cell(0, 7, _pdf_safe(inner._page_title), border=0, align="R")
                inner.set_draw_color(150, 150, 150)
                inner.line(_MARGIN, 18, inner.w - _MARGIN, 18)

            def footer(inner):
                inner.set_y(-14)
                inner.set_font("Helvetica", "I", 7)
                inner.cell(
                    0, 8,
                    f"{today_str()}  |  Page {inner.page_no()}/{{nb}}",
                    border=0, align="C",
                )

        self._pdf = _Pdf(title)

    def add_page(self, page_title: str) -> None:
        self._pdf._page_title = page_title
        self._pdf.add_page()

    @property
    def page_h(self) -> float:
        return self._pdf.h

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._pdf.output(str(path))

    # ─── Cell drawing ─────────────────────────────────────────────────────────

    def draw_cell(
        self,
        x: float, y: float,
        w: float, h: float,
        text: str = "",
        bg_hex: str | None = None,
        bold: bool = False,
        font_size: int = _FONT_CONTENT,
        text_color: tuple[int, int, int] = (0, 0, 0),
        align: str = "C",
    ) -> None:
        """Draws a cell with background, border and vertically centred text."""
        pdf = self._pdf

        if bg_hex:
            r, g, b = hex_to_rgb(bg_hex)
            pdf.set_fill_color(r, g, b)
            pdf.rect(x, y, w, h, style="F")

        pdf.set_draw_color(180, 180, 180)
        pdf.rect(x, y, w, h, style="D")

        if text:
            pdf.set_font("Helvetica", "B" if bold else "", font_size)
            pdf.set_text_color(*text_color)

            max_lines = max(1, int(h // _LINE_H))
            lines = [ln for ln in _pdf_safe(text).split("\n") if ln][:max_lines]
            y_text = y + max(0.5, (h - len(lines) * _LINE_H) / 2)
            for line in lines:
                pdf.set_xy(x, y_text)
                pdf.cell(w, _LINE_H, line[:40], border=0, align=align)
                y_text += _LINE_H

            pdf.set_text_color(0, 0, 0)


class PdfExporter:
    """One landscape page per weekday with rooms as columns.

    An anchor is drawn as one rectangle over all rows of its span;
    continuation cells are not drawn separately.
    """

    def __init__(self, grid: ScheduleGrid, title: str = "Weekly Schedule"):
        self.grid = grid
        self.title = title

    def export(self, output_path: Path, skip_empty_days: bool = False) -> Path:
        pdf = _SchedulePdf(self.title)
        pages = 0
        for day in self.grid.days:
            if skip_empty_days and self.grid.is_day_empty(day):
                continue
            self._draw_day(pdf, day)
            pages += 1
        if pages == 0:
            pdf.add_page("")
        pdf.save(output_path)
        return Path(output_path)

    def _draw_day(self, pdf: _SchedulePdf, day: Weekday) -> None:
        grid = self.grid
        pdf.add_page(day.value)

        room_w = (_PAGE_W - 2 * _MARGIN - _COL_TIME_W) / max(1, len(grid.rooms))
        available_h = pdf.page_h - _TOP - _BOTTOM - _ROW_HEADER_H
        row_h = min(_MAX_ROW_H, available_h / max(1, len(grid.slots)))

        # Header
        x, y = _MARGIN, _TOP
        pdf.draw_cell(x, y, _COL_TIME_W, _ROW_HEADER_H, "Time",
                      bg_hex=COLORS["header"], bold=True,
                      font_size=_FONT_HEADER, text_color=(255, 255, 255))
        for i, room in enumerate(grid.rooms):
            pdf.draw_cell(x + _COL_TIME_W + i * room_w, y, room_w, _ROW_HEADER_H,
                          room.name, bg_hex=COLORS["header"], bold=True,
                          font_size=_FONT_HEADER, text_color=(255, 255, 255))

        # Time column and empty cells first, anchors on top
        y0 = _TOP + _ROW_HEADER_H
        for idx, slot in enumerate(grid.slots):
            ry = y0 + idx * row_h
            pdf.draw_cell(x, ry, _COL_TIME_W, row_h, format_time_12h(slot),
                          bg_hex=COLORS["time"], font_size=_FONT_TINY)
            for i, cell in enumerate(grid.row(day, slot)):
                if cell.is_empty:
                    pdf.draw_cell(x + _COL_TIME_W + i * room_w, ry, room_w, row_h)

        room_pos = {r.id: i for i, r in enumerate(grid.rooms)}
        for _, slot, room_id, cell in grid.anchors(day):
            idx = grid.slots.index(slot)
            span = grid.visible_span(slot, cell)
            pdf.draw_cell(
                x + _COL_TIME_W + room_pos[room_id] * room_w,
                y0 + idx * row_h,
                room_w, span * row_h,
                format_booking_cell(cell.booking, with_time=True),
                bg_hex=status_color(cell.booking),
                font_size=_FONT_CONTENT,
            )
