"""Shared helpers for the terminal, Excel and PDF weekly grids."""

from datetime import date

from models.booking import Booking, BookingStatus

# ─── Colour palette (RRGGBB, without #) ───────────────────────────────────────

COLORS: dict[str, str] = {
    "regular":        "BAE6FD",   # sky
    "regular_border": "0EA5E9",
    "extra":          "FECACA",   # red
    "extra_border":   "EF4444",
    "empty":          "FFFFFF",
    "time":           "F3F4F6",
    "header":         "1F2937",
}

RICH_STYLES: dict[BookingStatus, str] = {
    BookingStatus.REGULAR: "bold sky_blue1 on grey15",
    BookingStatus.EXTRA:   "bold red1 on grey15",
}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Converts an RRGGBB string into an (r, g, b) tuple."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    return date.today().isoformat()


def status_color(booking: Booking) -> str:
    """Fill colour for a booking cell."""
    if booking.status is BookingStatus.EXTRA:
        return COLORS["extra"]
    return COLORS["regular"]


def format_time_12h(slot: str) -> str:
    """"13:30" -> "1:30 PM"."""
    hour_str, minute_str = slot.split(":")
    hour24 = int(hour_str)
    hour12 = 12 if hour24 % 12 == 0 else hour24 % 12
    period = "PM" if hour24 >= 12 else "AM"
    return f"{hour12}:{minute_str} {period}"


def format_booking_cell(booking: Booking, with_time: bool = False) -> str:
    """Cell content of an anchor: group, instructor, student count.

    with_time adds the booked interval as a last line.
    """
    lines = [
        booking.group_name,
        booking.instructor_name,
        f"{booking.students_count} students",
    ]
    if booking.status is BookingStatus.EXTRA:
        lines[0] += " (Extra)"
    if with_time:
        lines.append(f"{booking.time_from}-{booking.time_to}")
    return "\n".join(lines)
