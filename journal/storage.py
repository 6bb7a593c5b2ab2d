"""Key-value byte storage backing the journal's single slot.

Every backend offers the same three calls: ``get`` returns the stored bytes
(or None when the slot was never written), ``set`` overwrites the slot in
full, ``clear`` removes it. Backend failures surface as
`StorageReadError` / `StorageWriteError` so callers never need to know
which backend is configured.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from django.conf import settings
from django.db import DatabaseError
from django.utils.module_loading import import_string

from .errors import StorageError, StorageReadError, StorageWriteError
from .models import StorageSlot

logger = logging.getLogger(__name__)


class SlotStorage(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, data: bytes) -> None: ...

    def clear(self, key: str) -> None: ...


class MemorySlotStorage:
    """Process-local storage; nothing survives the interpreter."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None) -> None:
        self._slots: dict[str, bytes] = dict(initial or {})

    @classmethod
    def from_settings(cls) -> "MemorySlotStorage":
        return cls()

    def get(self, key: str) -> Optional[bytes]:
        return self._slots.get(key)

    def set(self, key: str, data: bytes) -> None:
        self._slots[key] = bytes(data)

    def clear(self, key: str) -> None:
        self._slots.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._slots


class DatabaseSlotStorage:
    """One `StorageSlot` row per key in the default database."""

    @classmethod
    def from_settings(cls) -> "DatabaseSlotStorage":
        return cls()

    def get(self, key: str) -> Optional[bytes]:
        try:
            data = StorageSlot.objects.filter(key=key).values_list("data", flat=True).first()
        except DatabaseError as exc:
            logger.exception("Reading slot %r failed", key)
            raise StorageReadError(f"Could not read slot {key!r}.") from exc
        # Some backends hand out memoryview for binary columns.
        return bytes(data) if data is not None else None

    def set(self, key: str, data: bytes) -> None:
        try:
            StorageSlot.objects.update_or_create(key=key, defaults={"data": bytes(data)})
        except DatabaseError as exc:
            logger.exception("Writing slot %r failed", key)
            raise StorageWriteError(f"Could not write slot {key!r}.") from exc

    def clear(self, key: str) -> None:
        try:
            StorageSlot.objects.filter(key=key).delete()
        except DatabaseError as exc:
            logger.exception("Clearing slot %r failed", key)
            raise StorageWriteError(f"Could not clear slot {key!r}.") from exc


class FileSlotStorage:
    """One file per key (``<directory>/<key>.json``)."""

    suffix = ".json"

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    @classmethod
    def from_settings(cls) -> "FileSlotStorage":
        return cls(settings.JOURNAL_STORAGE_DIR)

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid slot key {key!r}.")
        return self.directory / f"{key}{self.suffix}"

    def _checked_path(self, key: str, error: type[StorageError]) -> Path:
        try:
            return self.path_for(key)
        except ValueError as exc:
            raise error(str(exc)) from exc

    def get(self, key: str) -> Optional[bytes]:
        path = self._checked_path(key, StorageReadError)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.exception("Reading %s failed", path)
            raise StorageReadError(f"Could not read slot {key!r}.") from exc

    def set(self, key: str, data: bytes) -> None:
        path = self._checked_path(key, StorageWriteError)
        tmp = path.with_name(path.name + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            # Whole-file replace: readers never see a half-written payload.
            tmp.replace(path)
        except OSError as exc:
            logger.exception("Writing %s failed", path)
            raise StorageWriteError(f"Could not write slot {key!r}.") from exc

    def clear(self, key: str) -> None:
        path = self._checked_path(key, StorageWriteError)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.exception("Removing %s failed", path)
            raise StorageWriteError(f"Could not clear slot {key!r}.") from exc


def get_default_storage() -> SlotStorage:
    """Instantiate the backend named by ``settings.JOURNAL_STORAGE_BACKEND``."""
    backend = import_string(settings.JOURNAL_STORAGE_BACKEND)
    return backend.from_settings()
