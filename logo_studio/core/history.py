"""In-memory, size-bounded history of successful generations.

Short-term only:
    Entries live for the lifetime of the studio process. Nothing is written
    to disk.

Ordering:
    Newest first. Appending beyond `limit` evicts the oldest entries.
"""

from typing import Iterator

from logo_studio.core.types import HistoryEntry


HISTORY_LIMIT = 10


class GenerationHistory:
    """Bounded FIFO of `HistoryEntry` records, most recent at index 0."""

    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._entries: list[HistoryEntry] = []

    def append(self, entry: HistoryEntry) -> None:
        self._entries = [entry, *self._entries][: self.limit]

    def clear(self) -> None:
        self._entries = []

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))
