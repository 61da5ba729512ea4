"""Persistence port for the booking collection.

The whole collection is stored as one JSON array under a single key of a
key-value blob store. Records use the camelCase field names of the booking
model. There is no schema version; readers must stay compatible.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Sequence

from pydantic import TypeAdapter, ValidationError

from models.booking import Booking
from scheduling.errors import PersistenceReadError, PersistenceWriteError

logger = logging.getLogger(__name__)

_BOOKING_LIST = TypeAdapter(list[Booking])


# ─── Blob stores ──────────────────────────────────────────────────────────────

class BlobStore(Protocol):
    """Minimal key-value store holding text blobs."""

    def get(self, key: str) -> Optional[str]: ...

    def put(self, key: str, value: str) -> None: ...


class MemoryBlobStore:
    """Blob store kept in a dict. Used in tests and for throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def put(self, key: str, value: str) -> None:
        self.blobs[key] = value


class FileBlobStore:
    """One file per key: ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash never leaves a half-written blob behind.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def put(self, key: str, value: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


# ─── Repository ───────────────────────────────────────────────────────────────

class BookingRepository:
    """Reads and writes the booking collection as a whole."""

    def __init__(self, blob_store: BlobStore, key: str = "bookings") -> None:
        self.blob_store = blob_store
        self.key = key

    def load(self) -> Optional[list[Booking]]:
        """Returns the saved bookings, or None if nothing was saved yet.

        Raises PersistenceReadError if the blob exists but cannot be read,
        decoded or parsed.
        """
        try:
            raw = self.blob_store.get(self.key)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceReadError(f"Cannot read '{self.key}': {e}") from e
        if raw is None:
            return None

        try:
            bookings = _BOOKING_LIST.validate_json(raw)
        except ValidationError as e:
            raise PersistenceReadError(
                f"Saved bookings under '{self.key}' are malformed: "
                f"{e.error_count()} error(s), first: {e.errors()[0]['msg']}"
            ) from e

        ids = [b.id for b in bookings]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise PersistenceReadError(
                f"Saved bookings under '{self.key}' contain duplicate ids: {duplicates}"
            )
        logger.debug(f"Loaded {len(bookings)} bookings from '{self.key}'")
        return bookings

    def save(self, bookings: Sequence[Booking]) -> None:
        """Writes the complete collection. Raises PersistenceWriteError on failure."""
        data = _BOOKING_LIST.dump_json(list(bookings), by_alias=True, indent=2)
        try:
            self.blob_store.put(self.key, data.decode("utf-8"))
        except OSError as e:
            raise PersistenceWriteError(f"Cannot write '{self.key}': {e}") from e
