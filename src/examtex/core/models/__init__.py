"""
Core Models Package

Immutable data models shared by the store, the renderer and the history log.
"""

from .questions import (
    QuestionRecord,
    QuestionType,
    DEFAULT_KNOWLEDGE_POINT,
    EDITABLE_FIELDS,
    new_question_id,
)
from .history import HistoryRecord, HistoryOptions

__all__ = [
    "QuestionRecord",
    "QuestionType",
    "DEFAULT_KNOWLEDGE_POINT",
    "EDITABLE_FIELDS",
    "new_question_id",
    "HistoryRecord",
    "HistoryOptions",
]
