"""Double-booking detection.

Two bookings conflict when they share room and day and their half-open
intervals [from, to) overlap. Back-to-back bookings (one ends exactly when
the other starts) do not conflict.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from models.booking import Booking, BookingDraft, to_minutes

TimeValue = Union[str, int]


@dataclass(frozen=True)
class ConflictResult:
    conflict: bool
    conflicting_booking: Optional[Booking] = None

    def __bool__(self) -> bool:
        return self.conflict


def _minutes(value: TimeValue) -> int:
    return value if isinstance(value, int) else to_minutes(value)


def overlaps(from_a: TimeValue, to_a: TimeValue,
             from_b: TimeValue, to_b: TimeValue) -> bool:
    """True if [from_a, to_a) and [from_b, to_b) intersect.

    Accepts "HH:MM" strings or minutes since midnight.
    """
    return _minutes(from_a) < _minutes(to_b) and _minutes(to_a) > _minutes(from_b)


def check_conflict(
    candidate: BookingDraft,
    existing_bookings: Iterable[Booking],
    exclude_id: Optional[str] = None,
) -> ConflictResult:
    """Returns the first booking (in collection order) that clashes with candidate.

    exclude_id skips the booking being edited so it never conflicts with itself.
    """
    for b in existing_bookings:
        if exclude_id is not None and b.id == exclude_id:
            continue
        if b.room_id != candidate.room_id or b.day != candidate.day:
            continue
        if overlaps(b.start_minutes, b.end_minutes,
                    candidate.start_minutes, candidate.end_minutes):
            return ConflictResult(conflict=True, conflicting_booking=b)
    return ConflictResult(conflict=False)
