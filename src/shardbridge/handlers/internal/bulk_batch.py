"""
Bulk batching and retry bookkeeping for the bulk writer.
"""

from typing import Dict, List

from ...models import BulkEntry


class _BulkBatch:
    """
    The pending documents of a writer, bounded by a byte and an entry threshold.
    """

    def __init__(self, *, max_bytes: int, max_entries: int):
        self._max_bytes = max_bytes
        self._max_entries = max_entries
        self._entries: List[BulkEntry] = []
        self._size_bytes: int = 0

    @property
    def size_bytes(self) -> int:
        return self._size_bytes

    def __len__(self) -> int:
        return len(self._entries)

    def is_full(self) -> bool:
        return (
            self._size_bytes >= self._max_bytes
            or len(self._entries) >= self._max_entries
        )

    def add(self, entry: BulkEntry) -> None:
        self._entries.append(entry)
        self._size_bytes += entry.size

    def drain(self) -> List[BulkEntry]:
        """Removes and returns every pending entry, in write order."""
        entries, self._entries = self._entries, []
        self._size_bytes = 0
        return entries


class _RetryState:
    """
    Per-flush retry bookkeeping.

    Tracks the documents still to be (re)sent, the retry rounds used, the
    accumulated wait and how many times each document was re-sent after a
    version conflict.
    """

    def __init__(self, entries: List[BulkEntry]):
        self.pending: List[BulkEntry] = entries
        """The documents of the next request"""
        self.attempts: int = 0
        """Bulk requests sent so far"""
        self.retries: int = 0
        """Retry rounds started after the initial request"""
        self.waited: float = 0.0
        """Seconds spent waiting between rounds"""
        self._conflicts: Dict[int, int] = {}
        """Conflict re-sends per document ordinal"""

    def conflict_retries(self, entry: BulkEntry) -> int:
        return self._conflicts.get(entry.ordinal, 0)

    def record_conflict(self, entry: BulkEntry) -> None:
        self._conflicts[entry.ordinal] = self.conflict_retries(entry) + 1

    def next_round(self, entries: List[BulkEntry], wait: float) -> None:
        self.pending = entries
        self.retries += 1
        self.waited += wait
