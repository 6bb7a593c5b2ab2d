from __future__ import annotations

import json
import logging
from operator import attrgetter
from typing import Iterator, Optional

from django.conf import settings

from .entries import MoodEntry
from .errors import (
    SUCCESS,
    DeserializeError,
    Outcome,
    SerializeError,
    StorageError,
    StoreNotLoadedError,
)
from .storage import SlotStorage

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "moodEntries"


def serialize_entries(entries: tuple[MoodEntry, ...]) -> bytes:
    """Encode entries as a UTF-8 JSON array.

    Raises:
        SerializeError: If any entry cannot be encoded.
    """
    try:
        records = [e.to_record() for e in entries]
        return json.dumps(records, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError, AttributeError) as exc:
        raise SerializeError(f"Could not encode {len(entries)} entries: {exc}") from exc


def deserialize_entries(data: bytes) -> list[MoodEntry]:
    """Decode a payload produced by `serialize_entries`.

    Raises:
        DeserializeError: If the payload is not a JSON array of valid records.
    """
    try:
        records = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise DeserializeError(f"Payload is not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise DeserializeError(f"Payload must be a JSON array, got {type(records).__name__}.")
    return [MoodEntry.from_record(r) for r in records]


class EntryStore:
    """Append-only collection of mood entries persisted in a single slot.

    The store starts unloaded. ``load()`` fills it once from the slot;
    afterwards entries are appended in memory and ``save()`` writes the
    whole collection back, replacing whatever the slot held.
    """

    def __init__(self, storage: SlotStorage, key: Optional[str] = None) -> None:
        self.storage = storage
        self.key = key or getattr(settings, "JOURNAL_STORAGE_SLOT", DEFAULT_SLOT)
        self._entries: list[MoodEntry] = []
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def entries(self) -> tuple[MoodEntry, ...]:
        """Snapshot in insertion (creation) order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MoodEntry]:
        return iter(self.entries)

    def append(self, entry: MoodEntry) -> None:
        self._entries.append(entry)

    def sorted_descending(self) -> tuple[MoodEntry, ...]:
        """Entries newest first; ties keep insertion order."""
        return tuple(sorted(self._entries, key=attrgetter("date"), reverse=True))

    def save(self) -> Outcome:
        """Overwrite the slot with the full collection.

        Raises:
            StoreNotLoadedError: If called before a successful ``load()``.
        """
        if not self._loaded:
            raise StoreNotLoadedError(f"Load slot {self.key!r} before saving to it.")
        try:
            payload = serialize_entries(self.entries)
            self.storage.set(self.key, payload)
        except (SerializeError, StorageError) as exc:
            logger.error("Saving %d entries to slot %r failed: %s", len(self._entries), self.key, exc)
            return Outcome(error=exc)
        logger.debug("Saved %d entries (%d bytes) to slot %r", len(self._entries), len(payload), self.key)
        return SUCCESS

    def load(self) -> Outcome:
        """Fill the store from the slot.

        An empty slot and a malformed payload both leave the collection
        empty and count as success; only an unreadable slot fails.
        """
        if self._loaded:
            logger.debug("Slot %r already loaded; ignoring reload", self.key)
            return SUCCESS
        try:
            data = self.storage.get(self.key)
        except StorageError as exc:
            logger.error("Loading slot %r failed: %s", self.key, exc)
            return Outcome(error=exc)

        entries: list[MoodEntry] = []
        if data:
            try:
                entries = deserialize_entries(data)
            except DeserializeError as exc:
                logger.warning("Discarding unreadable payload in slot %r: %s", self.key, exc)

        self._entries = entries
        self._loaded = True
        logger.debug("Loaded %d entries from slot %r", len(entries), self.key)
        return SUCCESS
