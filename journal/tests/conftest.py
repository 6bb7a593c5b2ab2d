# journal/tests/conftest.py
from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Callable, Optional

import pytest

from journal.entries import MoodEntry, create_entry
from journal.errors import StorageReadError, StorageWriteError
from journal.moods import Mood
from journal.storage import MemorySlotStorage
from journal.store import EntryStore


class BrokenSlotStorage(MemorySlotStorage):
    """Memory storage that can be told to fail reads and/or writes."""

    def __init__(self, *, fail_reads: bool = False, fail_writes: bool = False, **kwargs) -> None:
        super().__init__(**kwargs)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key: str) -> Optional[bytes]:
        if self.fail_reads:
            raise StorageReadError(f"Could not read slot {key!r}.")
        return super().get(key)

    def set(self, key: str, data: bytes) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Could not write slot {key!r}.")
        super().set(key, data)


@pytest.fixture(autouse=True)
def _enable_db_access_for_all_tests(db) -> None:  # noqa: PT004
    """Grant DB access to all tests by default (pytest-django)."""
    pass


@pytest.fixture
def start_time() -> datetime:
    """Fixed, aware reference point for deterministic clocks."""
    return datetime(2025, 12, 2, 9, 30, tzinfo=dt_timezone.utc)


@pytest.fixture
def make_clock(start_time) -> Callable[..., Callable[[], datetime]]:
    """Factory for clocks that tick forward by `step` on every call."""

    def _make(start: Optional[datetime] = None, step: timedelta = timedelta(minutes=1)):
        ticks = itertools.count()
        base = start or start_time
        return lambda: base + step * next(ticks)

    return _make


@pytest.fixture
def make_entry(make_clock) -> Callable[..., MoodEntry]:
    """Factory for entries with increasing timestamps."""
    clock = make_clock()

    def _make(mood: Mood = Mood.HAPPY, note: str = "") -> MoodEntry:
        return create_entry(mood, note, clock=clock)

    return _make


@pytest.fixture
def memory_storage() -> MemorySlotStorage:
    return MemorySlotStorage()


@pytest.fixture
def loaded_store(memory_storage) -> EntryStore:
    """Empty store over a fresh memory slot, already loaded."""
    store = EntryStore(memory_storage, key="moodEntries")
    assert store.load().ok
    return store


@pytest.fixture
def entry_id() -> uuid.UUID:
    return uuid.UUID("12345678-1234-5678-1234-567812345678")
