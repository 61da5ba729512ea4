"""Tests for the weekly occupancy grid."""

import pytest

from config.defaults import default_rooms, seed_bookings
from models.booking import Booking, Weekday
from models.room import Room
from scheduling.grid import CellKind, build_grid, time_slots

ROOMS = default_rooms().rooms


def _booking(booking_id: str, time_from: str, time_to: str,
             room: str = "A", day: Weekday = Weekday.SATURDAY) -> Booking:
    return Booking(
        id=booking_id, group_name=f"Group {booking_id}", instructor_name="Eng. Esraa",
        day=day, time_from=time_from, time_to=time_to, room_id=room, students_count=8,
    )


def _cells_of(grid, booking_id: str) -> list[tuple[Weekday, str, str, CellKind]]:
    out = []
    for day in grid.days:
        for slot in grid.slots:
            for room in grid.rooms:
                cell = grid.cell(day, slot, room.id)
                if cell.booking is not None and cell.booking.id == booking_id:
                    out.append((day, slot, room.id, cell.kind))
    return out


# ─── TIME SLOTS ───────────────────────────────────────────────────────────────

class TestTimeSlots:
    def test_default_grid_has_27_slots(self):
        slots = time_slots()
        assert len(slots) == 27
        assert slots[0] == "09:00"
        assert slots[1] == "09:30"
        assert slots[-1] == "22:00"

    def test_custom_granularity(self):
        assert time_slots(60, 8, 10) == ["08:00", "09:00", "10:00"]
        assert len(time_slots(15, 9, 10)) == 5

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            time_slots(0)
        with pytest.raises(ValueError):
            time_slots(30, 12, 10)


# ─── GRID LAYOUT ──────────────────────────────────────────────────────────────

class TestBuildGrid:
    def test_structure_covers_all_days_slots_rooms(self):
        grid = build_grid([], ROOMS)
        assert len(grid.days) == 7
        assert grid.days[0] is Weekday.SATURDAY
        for day in grid.days:
            assert len(grid.cells[day]) == 27
            for slot in grid.slots:
                assert set(grid.cells[day][slot]) == {"A", "B", "C", "D"}
                assert all(c.is_empty for c in grid.row(day, slot))

    def test_two_hour_booking_spans_four_slots(self):
        grid = build_grid([_booking("1", "10:00", "12:00")], ROOMS)
        cells = _cells_of(grid, "1")
        assert cells == [
            (Weekday.SATURDAY, "10:00", "A", CellKind.ANCHOR),
            (Weekday.SATURDAY, "10:30", "A", CellKind.CONTINUATION),
            (Weekday.SATURDAY, "11:00", "A", CellKind.CONTINUATION),
            (Weekday.SATURDAY, "11:30", "A", CellKind.CONTINUATION),
        ]
        anchor = grid.cell(Weekday.SATURDAY, "10:00", "A")
        assert anchor.span == 4
        assert grid.cell(Weekday.SATURDAY, "12:00", "A").is_empty
        assert grid.cell(Weekday.SATURDAY, "09:30", "A").is_empty

    def test_partial_slot_rounds_up(self):
        grid = build_grid([_booking("1", "10:00", "10:45")], ROOMS)
        assert grid.cell(Weekday.SATURDAY, "10:00", "A").span == 2
        assert grid.cell(Weekday.SATURDAY, "10:30", "A").is_continuation
        assert grid.cell(Weekday.SATURDAY, "11:00", "A").is_empty

    def test_one_slot_booking_has_no_continuation(self):
        grid = build_grid([_booking("1", "13:00", "13:30", room="C")], ROOMS)
        assert [k for *_, k in _cells_of(grid, "1")] == [CellKind.ANCHOR]

    def test_misaligned_start_is_skipped(self):
        grid = build_grid([_booking("1", "10:15", "11:15")], ROOMS)
        assert _cells_of(grid, "1") == []

    def test_start_before_grid_is_skipped(self):
        grid = build_grid([_booking("1", "08:00", "10:00")], ROOMS)
        assert _cells_of(grid, "1") == []

    def test_end_not_after_start_is_skipped(self):
        grid = build_grid([_booking("1", "12:00", "10:00"), _booking("2", "12:00", "12:00")], ROOMS)
        assert _cells_of(grid, "1") == []
        assert _cells_of(grid, "2") == []

    def test_unknown_room_is_skipped(self):
        grid = build_grid([_booking("1", "10:00", "11:00", room="Z")], ROOMS)
        assert grid.anchors() == []

    def test_span_clamped_at_grid_end(self):
        grid = build_grid([_booking("1", "21:30", "23:30")], ROOMS)
        anchor = grid.cell(Weekday.SATURDAY, "21:30", "A")
        assert anchor.span == 4
        assert grid.visible_span("21:30", anchor) == 2
        assert [k for *_, k in _cells_of(grid, "1")] == [
            CellKind.ANCHOR, CellKind.CONTINUATION,
        ]

    def test_back_to_back_bookings(self):
        grid = build_grid([
            _booking("1", "10:00", "11:00"),
            _booking("2", "11:00", "12:00"),
        ], ROOMS)
        assert grid.cell(Weekday.SATURDAY, "10:30", "A").booking.id == "1"
        assert grid.cell(Weekday.SATURDAY, "11:00", "A").is_anchor
        assert grid.cell(Weekday.SATURDAY, "11:00", "A").booking.id == "2"

    def test_seed_bookings_layout(self):
        grid = build_grid(seed_bookings(), ROOMS)
        anchors = [(d, s, r, c.span) for d, s, r, c in grid.anchors()]
        assert anchors == [
            (Weekday.SATURDAY, "10:00", "A", 4),
            (Weekday.SUNDAY, "10:00", "B", 4),
            (Weekday.MONDAY, "11:00", "C", 4),
            (Weekday.THURSDAY, "12:30", "D", 3),
        ]
        assert grid.is_day_empty(Weekday.FRIDAY)
        assert not grid.is_day_empty(Weekday.THURSDAY)
        assert grid.anchors(Weekday.MONDAY)[0][3].booking.group_name == "Spike"

    def test_custom_rooms_and_granularity(self):
        rooms = [Room(id="L1", name="Lab 1")]
        bookings = [_booking("1", "08:00", "09:00", room="L1", day=Weekday.TUESDAY)]
        grid = build_grid(bookings, rooms, slot_minutes=15, start_hour=8, end_hour=12)
        assert len(grid.slots) == 17
        assert grid.cell(Weekday.TUESDAY, "08:00", "L1").span == 4
        assert grid.cell(Weekday.TUESDAY, "08:45", "L1").is_continuation
        assert grid.cell(Weekday.TUESDAY, "09:00", "L1").is_empty

    def test_input_is_not_mutated(self):
        bookings = seed_bookings()
        before = [b.model_copy() for b in bookings]
        build_grid(bookings, ROOMS)
        assert bookings == before
