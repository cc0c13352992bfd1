"""
examtex Core Package

Shared data models, JSON schemas and serialization helpers. These models
are the single source of truth for the builder, the history log and the
extraction adapters.
"""

from .models import QuestionRecord, QuestionType, HistoryRecord, HistoryOptions

__all__ = [
    "QuestionRecord",
    "QuestionType",
    "HistoryRecord",
    "HistoryOptions",
]
