"""Exceptions raised by the booking core."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.booking import Booking


class BookingError(Exception):
    """Base class for all booking errors."""


class BookingValidationError(BookingError, ValueError):
    """Form input is incomplete or inconsistent. Nothing was changed."""


class ConflictError(BookingError):
    """The candidate overlaps an existing booking in the same room and day."""

    MESSAGE = "Time conflict! Another booking exists in the same room at the same time."

    def __init__(self, conflicting_booking: "Booking") -> None:
        self.conflicting_booking = conflicting_booking
        super().__init__(f"{self.MESSAGE} ({conflicting_booking.describe()})")


class BookingNotFoundError(BookingError, KeyError):
    """No booking with the given id exists."""

    def __init__(self, booking_id: str) -> None:
        self.booking_id = booking_id
        super().__init__(booking_id)

    def __str__(self) -> str:
        return f"Booking '{self.booking_id}' not found."


class PersistenceReadError(BookingError):
    """The saved booking collection exists but cannot be parsed."""


class PersistenceWriteError(BookingError):
    """The booking collection could not be written."""
