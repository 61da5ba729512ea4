"""Data model for a bookable room (Pydantic v2)."""

from pydantic import BaseModel, Field


class Room(BaseModel):
    """A physical room that can be booked."""

    id: str = Field(min_length=1)    # "A", "B", ...
    name: str                        # "Room A"
