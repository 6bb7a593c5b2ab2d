from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class JournalError(Exception):
    """Base class for everything the journal core can fail with."""


class SerializeError(JournalError):
    """The entry collection could not be encoded."""


class DeserializeError(JournalError):
    """A persisted payload (or one of its records) is malformed."""


class StorageError(JournalError):
    """The storage slot could not be accessed."""


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


class StoreNotLoadedError(JournalError):
    """An EntryStore was asked to save before it was loaded."""


@dataclass(frozen=True)
class Outcome:
    """Result of a fallible store operation.

    Attributes:
        error: The failure, or None on success.
    """
    error: Optional[JournalError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_error(self) -> None:
        """Re-raise the captured failure, if any."""
        if self.error is not None:
            raise self.error


SUCCESS = Outcome()
