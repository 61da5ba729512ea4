from models.room import Room
from models.booking import (
    DAYS,
    Booking,
    BookingDraft,
    BookingForm,
    BookingStatus,
    Weekday,
    format_minutes,
    to_minutes,
)

__all__ = [
    "Room",
    "Booking",
    "BookingDraft",
    "BookingForm",
    "BookingStatus",
    "Weekday",
    "DAYS",
    "to_minutes",
    "format_minutes",
]
