"""
Serialization Utilities

JSON helpers for question lists and the history file.

- `serialize_questions` / `deserialize_questions`: list of QuestionRecord
  <-> list of wire dicts, validated row by row
- `load_questions_json` / `save_questions_json`: the question list files
  accepted by the CLI (either a bare list or ``{"questions": [...]}``)
- `serialize_history` / `deserialize_history`: the versioned history file
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Sequence

from ..models.history import HistoryRecord
from ..models.questions import QuestionRecord
from ..schemas.validator import (
    HISTORY_SCHEMA_VERSION,
    ValidationError,
    validate_history,
    validate_question,
)


# ─────────────────────────────────────────────────────────────────────────────
# Question Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_questions(questions: Iterable[QuestionRecord]) -> list[dict[str, str]]:
    """Serialize questions to a list of wire-format dicts."""
    return [q.to_dict() for q in questions]


def deserialize_questions(
    data: Sequence[dict[str, Any]],
    *,
    validate: bool = True,
) -> List[QuestionRecord]:
    """
    Deserialize a list of wire-format dicts.

    Args:
        data: List of question dictionaries
        validate: Whether to validate each row against the schema first

    Raises:
        ValidationError: If validate=True and a row is invalid
    """
    questions: List[QuestionRecord] = []
    for i, row in enumerate(data):
        if validate:
            try:
                validate_question(row)
            except ValidationError as e:
                raise ValidationError(
                    f"Question {i + 1}: {e}",
                    path=f"[{i}].{e.path}" if e.path else f"[{i}]",
                    errors=e.errors,
                ) from e
        questions.append(QuestionRecord.from_dict(row))
    return questions


def load_questions_json(path: Path) -> List[QuestionRecord]:
    """
    Load questions from a JSON file.

    Accepts either a bare list of questions or an object with a
    ``questions`` key (the shape returned by the extraction service).

    Raises:
        ValidationError: If the file content has the wrong shape
        json.JSONDecodeError: If the file is not JSON
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if isinstance(raw, dict):
        raw = raw.get("questions")
    if not isinstance(raw, list):
        raise ValidationError(
            f"{path.name}: expected a list of questions or an object with 'questions'",
            path="questions",
        )
    return deserialize_questions(raw)


def save_questions_json(path: Path, questions: Iterable[QuestionRecord]) -> None:
    """Write questions to a JSON file (bare list, UTF-8, readable)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_questions(questions), f, ensure_ascii=False, indent=2)


# ─────────────────────────────────────────────────────────────────────────────
# History Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_history(records: Iterable[HistoryRecord]) -> dict[str, Any]:
    """Serialize history records (newest first) to the versioned file layout."""
    return {
        "schema_version": HISTORY_SCHEMA_VERSION,
        "records": [r.to_dict() for r in records],
    }


def deserialize_history(data: Any) -> List[HistoryRecord]:
    """
    Deserialize the history file layout.

    A bare list (the v1 layout) is accepted and upgraded.

    Raises:
        ValidationError: If data is invalid
    """
    if isinstance(data, list):
        data = {"schema_version": HISTORY_SCHEMA_VERSION, "records": data}
    validate_history(data)
    return [HistoryRecord.from_dict(r) for r in data["records"]]
