from config.schema import (
    AppConfig,
    GridConfig,
    RoomConfig,
    StorageConfig,
)
from models.booking import Booking, BookingStatus, Weekday
from models.room import Room


def default_rooms() -> RoomConfig:
    """The four standard rooms A to D."""
    return RoomConfig(rooms=[
        Room(id="A", name="Room A"),
        Room(id="B", name="Room B"),
        Room(id="C", name="Room C"),
        Room(id="D", name="Room D"),
    ])


def default_app_config() -> AppConfig:
    """Complete default configuration.

    Grid: 09:00 - 22:00 in 30-minute steps (27 rows per day).
    Storage: data/bookings.json, unreadable state falls back to the seed data.
    """
    return AppConfig(
        rooms=default_rooms(),
        grid=GridConfig(),
        storage=StorageConfig(),
    )


def seed_bookings() -> list[Booking]:
    """Example bookings used when no saved state exists yet."""
    return [
        Booking(id="1", group_name="Arduino Code", instructor_name="Eng. Esraa",
                day=Weekday.SATURDAY, time_from="10:00", time_to="12:00",
                room_id="A", students_count=8, status=BookingStatus.REGULAR),
        Booking(id="2", group_name="Web", instructor_name="Eng. Sarah Mohamed",
                day=Weekday.SUNDAY, time_from="10:00", time_to="12:00",
                room_id="B", students_count=10, status=BookingStatus.EXTRA),
        Booking(id="3", group_name="Spike", instructor_name="Eng. Fatima Hassan",
                day=Weekday.MONDAY, time_from="11:00", time_to="13:00",
                room_id="C", students_count=9, status=BookingStatus.REGULAR),
        Booking(id="4", group_name="Arduino Block", instructor_name="Eng. Khalid Youssef",
                day=Weekday.THURSDAY, time_from="12:30", time_to="14:00",
                room_id="D", students_count=10, status=BookingStatus.REGULAR),
    ]
