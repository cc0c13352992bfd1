"""
Module: history.storage

Purpose:
    JSON persistence for the generation history.

    The history file is read once at startup and rewritten after every
    change. Loading never fails: a missing, unreadable, corrupt or
    schema-invalid file yields an empty log and a logged warning. Writes
    hold an exclusive portalocker lock so concurrent processes cannot
    interleave.

Key Classes:
    - HistoryStorage: Load/save a HistoryLog to a JSON file
    - PersistentHistory: HistoryLog facade that saves after each change

Dependencies:
    - portalocker: Cross-platform file locking
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

import portalocker

from examtex.core.models import HistoryRecord
from examtex.core.schemas import ValidationError
from examtex.core.utils import deserialize_history, serialize_history

from .log import HISTORY_CAPACITY, HistoryLog

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager for cross-platform locked file access.

    Yields:
        Open file handle with lock held.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


class HistoryStorage:
    """JSON file holding the history, newest record first."""

    def __init__(self, path: Path, capacity: int = HISTORY_CAPACITY) -> None:
        self.path = Path(path)
        self.capacity = capacity
        self.load_error: Optional[str] = None

    def load(self) -> HistoryLog:
        """
        Read the history file.

        Returns:
            The stored log, or an empty one if the file is missing or bad
            (the reason is kept in ``load_error``)
        """
        self.load_error = None
        if not self.path.exists():
            return HistoryLog(capacity=self.capacity)

        try:
            with locked_file(self.path, 'r', portalocker.LOCK_SH) as f:
                content = f.read()
            records = deserialize_history(json.loads(content)) if content.strip() else []
        except json.JSONDecodeError as e:
            self.load_error = f"History file is corrupted: {e}"
        except ValidationError as e:
            self.load_error = f"History file is invalid: {e}"
        except (OSError, KeyError, TypeError, ValueError) as e:
            self.load_error = f"Failed to read history: {e}"
        else:
            return HistoryLog(records, capacity=self.capacity)

        logger.warning(f"{self.load_error}; starting with empty history")
        return HistoryLog(capacity=self.capacity)

    def save(self, log: HistoryLog) -> None:
        """
        Rewrite the history file with the log's current entries.

        The file is truncated only while the exclusive lock is held.
        """
        payload = serialize_history(log.entries)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        with locked_file(self.path, 'r+', portalocker.LOCK_EX) as f:
            f.seek(0)
            f.truncate()
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.flush()
        logger.debug(f"Saved {len(log)} history records to {self.path.name}")


class PersistentHistory:
    """
    HistoryLog that writes through to a HistoryStorage.

    Example:
        >>> history = PersistentHistory(HistoryStorage(get_history_path()))
        >>> history.record(entry)      # saved immediately
        >>> history.entries[0] is entry
        True
    """

    def __init__(self, storage: HistoryStorage) -> None:
        self.storage = storage
        self.log = storage.load()

    @property
    def entries(self) -> tuple[HistoryRecord, ...]:
        return self.log.entries

    def __len__(self) -> int:
        return len(self.log)

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        return self.log.get(record_id)

    def record(self, entry: HistoryRecord) -> None:
        self.log.record(entry)
        self.storage.save(self.log)

    def remove(self, record_id: str) -> bool:
        removed = self.log.remove(record_id)
        if removed:
            self.storage.save(self.log)
        return removed

    def clear(self) -> None:
        self.log.clear()
        self.storage.save(self.log)
