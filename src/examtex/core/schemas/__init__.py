"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_question,
    validate_extraction_response,
    validate_history,
    ValidationError,
    HISTORY_SCHEMA_VERSION,
)

__all__ = [
    "validate_question",
    "validate_extraction_response",
    "validate_history",
    "ValidationError",
    "HISTORY_SCHEMA_VERSION",
]
