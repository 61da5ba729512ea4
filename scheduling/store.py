"""BookingStore: the single owner of the booking collection.

Every mutation runs the conflict check first, keeps the collection in
canonical order (weekday, then start time) and persists the whole collection.
A mutation either completes fully or leaves the previous state untouched.
"""

import logging
import time
from typing import Callable, Iterable, Optional

from models.booking import Booking, BookingDraft
from scheduling.conflicts import check_conflict
from scheduling.errors import (
    BookingNotFoundError,
    ConflictError,
    PersistenceReadError,
)
from scheduling.persistence import BookingRepository

logger = logging.getLogger(__name__)


def sort_key(booking: Booking) -> tuple[int, int]:
    """Canonical order: week position, then start time."""
    return booking.day.order, booking.start_minutes


def sort_bookings(bookings: Iterable[Booking]) -> list[Booking]:
    """Stable sort into canonical order."""
    return sorted(bookings, key=sort_key)


class TimestampIdFactory:
    """Issues millisecond-timestamp ids, strictly increasing within a process."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self, existing_ids: set[str]) -> str:
        candidate = max(int(self._clock() * 1000), self._last + 1)
        while str(candidate) in existing_ids:
            candidate += 1
        self._last = candidate
        return str(candidate)


class BookingStore:
    """Owns the authoritative, sorted booking list.

    Usage:
        store = BookingStore(BookingRepository(FileBlobStore(Path("data"))))
        booking = store.add(draft)
    """

    def __init__(
        self,
        repository: BookingRepository,
        seed: Optional[Callable[[], list[Booking]]] = None,
        on_corrupt_state: str = "seed",
        id_factory: Optional[Callable[[set[str]], str]] = None,
    ) -> None:
        if on_corrupt_state not in ("seed", "raise"):
            raise ValueError(f"Unknown corrupt-state policy: {on_corrupt_state}")
        self.repository = repository
        self._seed = seed or (lambda: [])
        self._id_factory = id_factory or TimestampIdFactory()
        self.seeded = False
        self._bookings: list[Booking] = self._load(on_corrupt_state)

    def _load(self, on_corrupt_state: str) -> list[Booking]:
        try:
            saved = self.repository.load()
        except PersistenceReadError as e:
            if on_corrupt_state == "raise":
                raise
            logger.warning(f"{e} - starting from the example bookings")
            saved = None

        if saved is None:
            self.seeded = True
            return sort_bookings(self._seed())
        return sort_bookings(saved)

    # ─── Reading ───

    @property
    def bookings(self) -> tuple[Booking, ...]:
        """Snapshot of the collection in canonical order."""
        return tuple(self._bookings)

    def __len__(self) -> int:
        return len(self._bookings)

    def get(self, booking_id: str) -> Optional[Booking]:
        for b in self._bookings:
            if b.id == booking_id:
                return b
        return None

    # ─── Mutations ───

    def add(self, draft: BookingDraft) -> Booking:
        """Inserts a new booking and returns it with its fresh id.

        Raises ConflictError if it overlaps an existing booking.
        """
        result = check_conflict(draft, self._bookings)
        if result.conflict:
            raise ConflictError(result.conflicting_booking)

        new_id = self._id_factory({b.id for b in self._bookings})
        booking = Booking(id=new_id, **draft.model_dump())
        self._commit(sort_bookings([*self._bookings, booking]))
        logger.info(f"Added booking {booking.id}: {booking.describe()}")
        return booking

    def update(self, booking: Booking) -> Booking:
        """Replaces the booking with the same id.

        Raises BookingNotFoundError for unknown ids and ConflictError if the
        new times clash with another booking. The booking never conflicts
        with its own previous version.
        """
        if self.get(booking.id) is None:
            raise BookingNotFoundError(booking.id)

        result = check_conflict(booking, self._bookings, exclude_id=booking.id)
        if result.conflict:
            raise ConflictError(result.conflicting_booking)

        updated = [booking if b.id == booking.id else b for b in self._bookings]
        self._commit(sort_bookings(updated))
        logger.info(f"Updated booking {booking.id}: {booking.describe()}")
        return booking

    def remove(self, booking_id: str) -> None:
        """Deletes the booking if present. Unknown ids are ignored."""
        remaining = [b for b in self._bookings if b.id != booking_id]
        if len(remaining) == len(self._bookings):
            logger.debug(f"Remove: no booking {booking_id}, nothing to do")
            return
        self._commit(remaining)
        logger.info(f"Removed booking {booking_id}")

    def _commit(self, bookings: list[Booking]) -> None:
        # Persist first: on a write error the in-memory state stays as it was
        self.repository.save(bookings)
        self._bookings = bookings
