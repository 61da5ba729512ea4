from pydantic import BaseModel, Field, model_validator
from typing import Literal

from models.room import Room


# ─── ROOMS ───

class RoomConfig(BaseModel):
    """The fixed set of bookable rooms. Never changed at runtime."""
    # All rooms in display order
    rooms: list[Room] = Field(
        description="Bookable rooms in display order")

    @model_validator(mode='after')
    def validate_unique_ids(self):
        """Room ids must be unique."""
        seen: set[str] = set()
        for room in self.rooms:
            if room.id in seen:
                raise ValueError(f"Room id '{room.id}' is defined twice")
            seen.add(room.id)
        if not self.rooms:
            raise ValueError("At least one room must be configured")
        return self

    @property
    def room_ids(self) -> list[str]:
        return [r.id for r in self.rooms]

    def get_room(self, room_id: str) -> Room | None:
        for r in self.rooms:
            if r.id == room_id:
                return r
        return None


# ─── WEEKLY GRID ───

class GridConfig(BaseModel):
    """Geometry of the weekly occupancy grid.

    Slots run from start_hour:00 to end_hour:00 inclusive in steps of
    slot_minutes. Bookings that do not start exactly on a slot are not drawn.
    """
    # Width of one grid row in minutes
    slot_minutes: int = Field(30, ge=5, le=120,
        description="Slot granularity in minutes")
    # First row of the grid (hour, 24h)
    start_hour: int = Field(9, ge=0, le=23,
        description="First grid hour")
    # Last row of the grid (hour, 24h, inclusive)
    end_hour: int = Field(22, ge=1, le=23,
        description="Last grid hour (inclusive)")

    @model_validator(mode='after')
    def validate_hours(self):
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"start_hour ({self.start_hour}) must be before end_hour ({self.end_hour})")
        if (self.end_hour - self.start_hour) * 60 % self.slot_minutes:
            raise ValueError(
                f"slot_minutes ({self.slot_minutes}) must divide the span "
                f"{self.start_hour:02d}:00-{self.end_hour:02d}:00 evenly")
        return self


# ─── STORAGE ───

class StorageConfig(BaseModel):
    """Where and how the booking collection is persisted."""
    # Directory of the file-backed blob store
    data_dir: str = Field("data",
        description="Directory for persisted state")
    # Key under which the whole collection is stored
    key: str = Field("bookings", min_length=1,
        description="Blob key of the booking collection")
    # What to do when the stored collection cannot be read:
    # "seed"  = log a warning and start from the example bookings
    # "raise" = stop with an error, the stored blob stays untouched
    on_corrupt_state: Literal["seed", "raise"] = Field("seed",
        description="Behaviour on unreadable saved state")


# ─── COMPLETE CONFIG ───

class AppConfig(BaseModel):
    """Complete application configuration."""
    # Title shown in the terminal and on exports
    app_name: str = Field("Academy Room Booking System",
        description="Application title")
    # Bookable rooms
    rooms: RoomConfig
    # Grid geometry
    grid: GridConfig = Field(default_factory=GridConfig)
    # Persistence
    storage: StorageConfig = Field(default_factory=StorageConfig)
