"""
Module: history.log

Purpose:
    In-memory policy for the generation history: newest first, fixed
    capacity, oldest entries evicted. Persistence lives in history.storage.

Key Classes:
    - HistoryLog: Bounded newest-first list of HistoryRecord
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, Optional

from examtex.core.models import HistoryRecord

HISTORY_CAPACITY = 50


class HistoryLog:
    """
    Newest-first list of history records with a fixed capacity.

    Example:
        >>> log = HistoryLog(capacity=2)
        >>> for r in (r1, r2, r3):
        ...     log.record(r)
        >>> [r.id for r in log.entries] == [r3.id, r2.id]
        True
    """

    def __init__(
        self,
        records: Iterable[HistoryRecord] = (),
        capacity: int = HISTORY_CAPACITY,
    ) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive: {capacity}")
        self.capacity = capacity
        # Given records are already newest first
        self._entries: Deque[HistoryRecord] = deque(list(records)[:capacity], maxlen=capacity)

    @property
    def entries(self) -> tuple[HistoryRecord, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(self.entries)

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        for entry in self._entries:
            if entry.id == record_id:
                return entry
        return None

    def record(self, entry: HistoryRecord) -> None:
        """Prepend ``entry``; the oldest entry drops off beyond capacity."""
        self._entries.appendleft(entry)

    def remove(self, record_id: str) -> bool:
        """Delete one entry by id. Returns False if it was not present."""
        entry = self.get(record_id)
        if entry is None:
            return False
        self._entries.remove(entry)
        return True

    def clear(self) -> None:
        self._entries.clear()
