from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .errors import DeserializeError
from .moods import Mood, glyph_for, label_for

RECORD_FIELDS: tuple[str, ...] = ("id", "date", "mood", "note")


@dataclass(frozen=True)
class MoodEntry:
    """One saved mood selection with its optional note.

    Attributes:
        id: Unique identifier, assigned at creation.
        date: Creation time.
        mood: The selected mood.
        note: Free text, possibly empty.
    """
    id: uuid.UUID
    date: datetime
    mood: Mood
    note: str

    @property
    def glyph(self) -> str:
        return glyph_for(self.mood)

    @property
    def label(self) -> str:
        return label_for(self.mood)

    def to_record(self) -> dict[str, str]:
        """Plain, JSON-ready representation of the entry."""
        return {
            "id": str(self.id),
            "date": self.date.isoformat(),
            "mood": glyph_for(self.mood),
            "note": self.note,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "MoodEntry":
        """Rebuild an entry from `to_record` output.

        Raises:
            DeserializeError: If the record is not a mapping, misses a field,
                or carries a value that cannot be parsed.
        """
        if not isinstance(record, Mapping):
            raise DeserializeError(f"Entry record must be an object, got {type(record).__name__}.")
        missing = [f for f in RECORD_FIELDS if f not in record]
        if missing:
            raise DeserializeError(f"Entry record is missing {', '.join(missing)}.")

        try:
            entry_id = uuid.UUID(str(record["id"]))
        except ValueError as exc:
            raise DeserializeError(f"Invalid entry id {record['id']!r}.") from exc

        raw_date = record["date"]
        try:
            date = parse_datetime(raw_date) if isinstance(raw_date, str) else None
        except ValueError as exc:
            raise DeserializeError(f"Invalid entry date {raw_date!r}.") from exc
        if date is None:
            raise DeserializeError(f"Invalid entry date {raw_date!r}.")
        if timezone.is_naive(date):
            raise DeserializeError(f"Entry date {raw_date!r} has no UTC offset.")

        try:
            mood = Mood(record["mood"])
        except ValueError as exc:
            raise DeserializeError(f"Unknown mood {record['mood']!r}.") from exc

        note = record["note"]
        if not isinstance(note, str):
            raise DeserializeError("Entry note must be a string.")

        return cls(id=entry_id, date=date, mood=mood, note=note)

    def __str__(self) -> str:
        return f"{self.glyph} {self.label} @ {self.date:%Y-%m-%d %H:%M}"


def create_entry(
    mood: Mood,
    note: str,
    *,
    clock: Callable[[], datetime] = timezone.now,
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
) -> MoodEntry:
    """Build a new entry stamped with a fresh id and the current time.

    The note is stripped of surrounding whitespace and newlines. A naive
    clock reading is taken to be in the current time zone.
    """
    date = clock()
    if timezone.is_naive(date):
        date = timezone.make_aware(date)
    return MoodEntry(id=id_factory(), date=date, mood=mood, note=note.strip())
