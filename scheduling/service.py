"""User-facing booking operations.

Validates raw form data, forwards it to the BookingStore and turns the
outcome into an OperationResult with a message for the user. Deleting is
unconditional here; asking the user for confirmation is the caller's job.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from config.defaults import seed_bookings
from config.schema import AppConfig
from models.booking import Booking, BookingForm
from scheduling.errors import (
    BookingNotFoundError,
    BookingValidationError,
    ConflictError,
)
from scheduling.grid import ScheduleGrid, build_grid
from scheduling.persistence import BlobStore, BookingRepository, FileBlobStore
from scheduling.store import BookingStore

logger = logging.getLogger(__name__)

MSG_ADDED = "Booking added successfully!"
MSG_UPDATED = "Booking updated successfully!"
MSG_REQUIRED = "Please fill in all required fields."
MSG_TIME_ORDER = "Start time must be before end time."

_REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}


@dataclass(frozen=True)
class OperationResult:
    success: bool
    message: str
    booking: Optional[Booking] = None


def _validation_message(exc: ValidationError) -> str:
    """Maps the first pydantic error to a short user message."""
    errors = exc.errors()
    if any(e["type"] in _REQUIRED_ERROR_TYPES for e in errors):
        return MSG_REQUIRED
    first = errors[0]
    msg = first["msg"].removeprefix("Value error, ")
    loc = ".".join(str(p) for p in first.get("loc", ()))
    if not loc or msg == MSG_TIME_ORDER:
        return msg
    return f"{loc}: {msg}"


class BookingService:
    """Facade used by the CLI (or any other front end)."""

    def __init__(self, store: BookingStore, config: AppConfig) -> None:
        self.store = store
        self.config = config

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        blob_store: Optional[BlobStore] = None,
    ) -> "BookingService":
        """Wires store, repository and blob store as configured."""
        storage = config.storage
        if blob_store is None:
            blob_store = FileBlobStore(Path(storage.data_dir))
        repository = BookingRepository(blob_store, key=storage.key)
        store = BookingStore(
            repository,
            seed=seed_bookings,
            on_corrupt_state=storage.on_corrupt_state,
        )
        return cls(store, config)

    # ─── Validation ───

    def validate_form(self, data: Mapping[str, Any]) -> BookingForm:
        """Parses form data. Raises BookingValidationError with a user message."""
        try:
            form = BookingForm.model_validate(dict(data))
        except ValidationError as e:
            raise BookingValidationError(_validation_message(e)) from e
        if self.config.rooms.get_room(form.room_id) is None:
            raise BookingValidationError(f"Unknown room '{form.room_id}'.")
        return form

    # ─── Operations ───

    def list_bookings(self) -> list[Booking]:
        return list(self.store.bookings)

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self.store.get(booking_id)

    def add_booking(self, data: Mapping[str, Any]) -> OperationResult:
        try:
            draft = self.validate_form(data).to_draft()
            booking = self.store.add(draft)
        except (BookingValidationError, ConflictError) as e:
            logger.info(f"Add rejected: {e}")
            return OperationResult(success=False, message=str(e))
        return OperationResult(success=True, message=MSG_ADDED, booking=booking)

    def update_booking(self, booking_id: str, data: Mapping[str, Any]) -> OperationResult:
        """Applies form data on top of the existing booking; the id is kept."""
        existing = self.store.get(booking_id)
        if existing is None:
            return OperationResult(success=False, message=str(BookingNotFoundError(booking_id)))

        merged = existing.model_dump(exclude={"id"})
        merged.update({to_snake(k): v for k, v in data.items() if v is not None})
        try:
            draft = self.validate_form(merged).to_draft()
            booking = self.store.update(Booking(id=booking_id, **draft.model_dump()))
        except (BookingValidationError, ConflictError, BookingNotFoundError) as e:
            logger.info(f"Update of {booking_id} rejected: {e}")
            return OperationResult(success=False, message=str(e))
        return OperationResult(success=True, message=MSG_UPDATED, booking=booking)

    def delete_booking(self, booking_id: str) -> None:
        self.store.remove(booking_id)

    def build_grid(self) -> ScheduleGrid:
        grid = self.config.grid
        return build_grid(
            self.store.bookings,
            self.config.rooms.rooms,
            slot_minutes=grid.slot_minutes,
            start_hour=grid.start_hour,
            end_hour=grid.end_hour,
        )
