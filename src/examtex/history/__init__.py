"""
History Package

Capped, newest-first log of past generations and its JSON persistence.
"""

from .log import HistoryLog, HISTORY_CAPACITY
from .storage import HistoryStorage, PersistentHistory

__all__ = [
    "HistoryLog",
    "HISTORY_CAPACITY",
    "HistoryStorage",
    "PersistentHistory",
]
