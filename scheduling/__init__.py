"""Booking core: conflict checking, weekly grid, store and service."""

from .errors import (
    BookingError,
    BookingNotFoundError,
    BookingValidationError,
    ConflictError,
    PersistenceReadError,
    PersistenceWriteError,
)
from .conflicts import ConflictResult, check_conflict, overlaps
from .grid import CellKind, GridCell, ScheduleGrid, build_grid, time_slots
from .persistence import BlobStore, BookingRepository, FileBlobStore, MemoryBlobStore
from .store import BookingStore
from .service import BookingService, OperationResult

__all__ = [
    "BookingError",
    "BookingNotFoundError",
    "BookingValidationError",
    "ConflictError",
    "PersistenceReadError",
    "PersistenceWriteError",
    "ConflictResult",
    "check_conflict",
    "overlaps",
    "CellKind",
    "GridCell",
    "ScheduleGrid",
    "build_grid",
    "time_slots",
    "BlobStore",
    "BookingRepository",
    "FileBlobStore",
    "MemoryBlobStore",
    "BookingStore",
    "BookingService",
    "OperationResult",
]
