"""Data models for bookings (Pydantic v2).

Times are fixed-width zero-padded "HH:MM" strings (24h). The persisted
representation uses camelCase field names (``groupName``, ``timeFrom``, ...);
both spellings are accepted on input.
"""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Weekday(str, Enum):
    """The fixed 7-day week, in display order (Saturday first)."""

    SATURDAY = "Saturday"
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"

    @property
    def order(self) -> int:
        """Position in the week sequence (Saturday=0 ... Friday=6)."""
        return DAYS.index(self)


DAYS: list[Weekday] = list(Weekday)


class BookingStatus(str, Enum):
    REGULAR = "Regular"
    EXTRA = "Extra"


def to_minutes(value: str) -> int:
    """Converts "HH:MM" into minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total: int) -> str:
    """Converts minutes since midnight into "HH:MM"."""
    return f"{total // 60:02d}:{total % 60:02d}"


def _check_time(value: str) -> str:
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise ValueError(f"Invalid time '{value}', expected HH:MM (00:00-23:59)")
    return value


# ─── Stored records ───────────────────────────────────────────────────────────

class BookingDraft(BaseModel):
    """All booking fields except the id. This is what the store receives on add."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    group_name: str
    instructor_name: str
    day: Weekday
    time_from: str                   # "HH:MM", inclusive
    time_to: str                     # "HH:MM", exclusive
    room_id: str
    students_count: int = Field(ge=1)
    status: BookingStatus = BookingStatus.REGULAR

    @field_validator("time_from", "time_to")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        return _check_time(v)

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.time_from)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.time_to)

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    def describe(self) -> str:
        """Short human-readable description, e.g. for conflict messages."""
        return (
            f"{self.group_name} ({self.instructor_name}), "
            f"{self.day.value} {self.time_from}-{self.time_to}, room {self.room_id}"
        )


class Booking(BookingDraft):
    """A stored booking. The id is assigned by the store and never changes."""

    id: str = Field(min_length=1)

    def to_draft(self) -> BookingDraft:
        return BookingDraft.model_validate(self.model_dump(exclude={"id"}))


# ─── Form input ───────────────────────────────────────────────────────────────

class BookingForm(BaseModel):
    """Raw form input, validated before it reaches the store.

    Required strings are stripped and must not be empty. The start time must
    lie strictly before the end time.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    group_name: str = Field(min_length=1)
    instructor_name: str = Field(min_length=1)
    day: Weekday
    time_from: str = Field(min_length=1)
    time_to: str = Field(min_length=1)
    room_id: str = Field(min_length=1)
    students_count: int = Field(ge=1)
    status: Optional[BookingStatus] = None

    @field_validator("time_from", "time_to")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        return _check_time(v)

    @field_validator("status", mode="before")
    @classmethod
    def empty_status_is_default(cls, v):
        return v or None

    @model_validator(mode="after")
    def validate_time_order(self):
        if to_minutes(self.time_from) >= to_minutes(self.time_to):
            raise ValueError("Start time must be before end time.")
        return self

    def to_draft(self) -> BookingDraft:
        return BookingDraft(
            group_name=self.group_name,
            instructor_name=self.instructor_name,
            day=self.day,
            time_from=self.time_from,
            time_to=self.time_to,
            room_id=self.room_id,
            students_count=self.students_count,
            status=self.status or BookingStatus.REGULAR,
        )
