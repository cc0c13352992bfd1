"""
Module: questions

Purpose:
    Provides the QuestionRecord dataclass - the row the user edits in the
    question table and the unit the assembly engine renders. Immutable:
    field edits produce a new record with the same id.

Key Functions:
    - QuestionRecord.with_field(): Copy with one editable field replaced
    - QuestionRecord.to_dict() / QuestionRecord.from_dict(): Serialization
    - new_question_id(): Opaque unique id generation

Dependencies:
    - dataclasses (std)
    - uuid (std)

Used By:
    - builder.store.QuestionStore
    - builder.output.renderer
    - extraction.normalize
    - core.utils.serialization
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from typing import Any, Dict


class QuestionType:
    """
    Known question type labels.

    The type field is an open enumeration: any string is accepted and is
    used verbatim as a section heading when grouping. Only SOLUTION changes
    formatting (long-form layout with the larger gap).
    """

    CHOICE = "选择题"
    FILL_IN = "填空题"
    SOLUTION = "解答题"
    OTHER = "其他"


DEFAULT_KNOWLEDGE_POINT = "未分类"

# Fields a user may edit through the store ("id" is never editable)
EDITABLE_FIELDS = frozenset({"number", "content", "knowledge_point", "source", "type"})

# Wire keys (camelCase, shared with history files and collaborator payloads)
_WIRE_KEYS = {
    "id": "id",
    "number": "number",
    "content": "content",
    "knowledge_point": "knowledgePoint",
    "source": "source",
    "type": "type",
}


def new_question_id(prefix: str = "q") -> str:
    """Return a new opaque question id like ``"q-3f2a..."``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class QuestionRecord:
    """
    One question in the exam (immutable).

    Attributes:
        id: Opaque unique identifier, stable for the record's lifetime
        number: Display label, may be non-numeric ("3", "12(a)", "附加题")
        content: LaTeX body, emitted verbatim by the renderer
        knowledge_point: Free-text classification tag
        source: Free-text provenance tag (exam name, date, ...)
        type: Question type label, see QuestionType

    Example:
        >>> q = QuestionRecord(id="q-1", number="1", content="$1+1=$")
        >>> q.with_field("source", "2024 期中").source
        '2024 期中'
    """

    id: str
    number: str = ""
    content: str = ""
    knowledge_point: str = ""
    source: str = ""
    type: str = QuestionType.CHOICE

    def __post_init__(self) -> None:
        """Validate record on construction."""
        if not self.id:
            raise ValueError("id must be a non-empty string")

    @property
    def is_solution(self) -> bool:
        """True for long-form questions that get the solution gap."""
        return self.type == QuestionType.SOLUTION

    def with_field(self, field_name: str, value: str) -> QuestionRecord:
        """
        Return a copy with one editable field replaced.

        Args:
            field_name: One of EDITABLE_FIELDS
            value: New value

        Raises:
            ValueError: If field_name is not editable (including "id")
        """
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Field is not editable: {field_name!r}")
        return replace(self, **{field_name: value})

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, str]:
        """Serialize to the camelCase wire format."""
        return {wire: getattr(self, attr) for attr, wire in _WIRE_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> QuestionRecord:
        """
        Deserialize from the camelCase wire format.

        Missing optional fields default to empty strings; a missing id gets
        a freshly generated one.
        """
        values = {
            attr: "" if data.get(wire) is None else str(data.get(wire))
            for attr, wire in _WIRE_KEYS.items()
            if attr != "id"
        }
        if not values["type"]:
            values["type"] = QuestionType.OTHER
        return cls(id=str(data.get("id") or new_question_id()), **values)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"QuestionRecord({self.id!r}, number={self.number!r}, type={self.type!r})"
