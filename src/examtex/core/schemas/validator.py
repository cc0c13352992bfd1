"""
Schema Validation Utilities

Validates JSON data against the bundled schemas.

- `validate_question()`: a single question row (question list files)
- `validate_extraction_response()`: raw payload from an extraction/import
  collaborator
- `validate_history()`: the persisted history file

All validators fail fast with a ValidationError carrying the JSON path of
the first problem found.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
HISTORY_SCHEMA_VERSION = 2  # v1 was a bare list of records


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate(data: Any, schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e


def validate_question(data: dict[str, Any]) -> None:
    """
    Validate one question row.

    Args:
        data: Question dictionary in wire format (camelCase keys)

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Question must be an object, got {type(data).__name__}")
    _validate(data, "question")


def validate_extraction_response(data: Any) -> None:
    """
    Validate a collaborator response of the form ``{"questions": [...]}``.

    Raises:
        ValidationError: If data is invalid
    """
    _validate(data, "extraction")


def validate_history(data: Any) -> None:
    """
    Validate the persisted history file.

    Raises:
        ValidationError: If data is invalid or has an unsupported version
    """
    if not isinstance(data, dict):
        raise ValidationError("History file must be an object", path="")

    version = data.get("schema_version")
    if version != HISTORY_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported history schema version: {version} (expected {HISTORY_SCHEMA_VERSION})",
            path="schema_version",
        )
    _validate(data, "history")
