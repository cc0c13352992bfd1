"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    serialize_questions,
    deserialize_questions,
    load_questions_json,
    save_questions_json,
    serialize_history,
    deserialize_history,
)

__all__ = [
    "serialize_questions",
    "deserialize_questions",
    "load_questions_json",
    "save_questions_json",
    "serialize_history",
    "deserialize_history",
]
