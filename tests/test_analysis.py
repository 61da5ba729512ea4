"""Tests for the integrity check of stored bookings."""

from analysis.schedule_validator import ScheduleValidator
from config.defaults import default_app_config, seed_bookings
from models.booking import Booking, Weekday


def _booking(booking_id: str, time_from: str, time_to: str, room: str = "A",
             day: Weekday = Weekday.MONDAY) -> Booking:
    return Booking(
        id=booking_id, group_name="Web", instructor_name="Eng. Sarah Mohamed",
        day=day, time_from=time_from, time_to=time_to, room_id=room, students_count=10,
    )


class TestScheduleValidator:
    def setup_method(self):
        self.validator = ScheduleValidator(default_app_config())

    def test_seed_data_is_valid(self):
        report = self.validator.validate(seed_bookings())
        assert report.is_valid
        assert report.violations == []

    def test_overlap_reported(self):
        report = self.validator.validate([
            _booking("1", "10:00", "12:00"),
            _booking("2", "11:00", "13:00"),
        ])
        assert not report.is_valid
        [v] = report.errors
        assert v.constraint == "room_double_booking"
        assert v.entity == "2"
        assert "overlaps booking 1" in v.description

    def test_touching_and_other_rooms_not_reported(self):
        report = self.validator.validate([
            _booking("1", "10:00", "12:00"),
            _booking("2", "12:00", "13:00"),
            _booking("3", "10:00", "12:00", room="B"),
            _booking("4", "10:00", "12:00", day=Weekday.TUESDAY),
        ])
        assert report.is_valid

    def test_unknown_room_reported(self):
        report = self.validator.validate([_booking("1", "10:00", "11:00", room="Z")])
        assert [v.constraint for v in report.errors] == ["unknown_room"]

    def test_reversed_times_reported(self):
        report = self.validator.validate([_booking("1", "12:00", "10:00")])
        assert "time_order" in [v.constraint for v in report.errors]

    def test_off_grid_start_is_warning_only(self):
        report = self.validator.validate([_booking("1", "10:15", "11:00")])
        assert report.is_valid
        assert [v.constraint for v in report.warnings] == ["off_grid"]

    def test_print_rich_runs(self, capsys):
        report = self.validator.validate([
            _booking("1", "10:00", "12:00"),
            _booking("2", "11:00", "13:00"),
        ])
        report.print_rich()
        out = capsys.readouterr().out
        assert "room_double_booking" in out
