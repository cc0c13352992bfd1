"""
Module: history

Purpose:
    Provides the HistoryRecord dataclass - an immutable snapshot of one
    successful generation (questions, rendered LaTeX and the options used).

Key Functions:
    - HistoryRecord.create(): Build a record stamped with the current time
    - HistoryRecord.to_dict() / HistoryRecord.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - time (std)
    - .questions.QuestionRecord

Used By:
    - history.log.HistoryLog
    - history.storage.HistoryStorage
    - builder.controller.ExamSession
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from .questions import QuestionRecord


@dataclass(frozen=True)
class HistoryOptions:
    """
    Assembly options captured with a history record.

    Attributes:
        group_by_type: Whether output was grouped into per-type sections
        preserve_original_numbering: Whether stored numbers were emitted
        style: Snapshot of StyleConfig.to_dict() at generation time
    """

    group_by_type: bool = False
    preserve_original_numbering: bool = False
    style: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "sortByType": self.group_by_type,
            "keepOriginalNumbers": self.preserve_original_numbering,
            "enableTikz": False,
        }
        if self.style is not None:
            d["style"] = dict(self.style)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HistoryOptions:
        style = data.get("style")
        return cls(
            group_by_type=bool(data.get("sortByType", False)),
            preserve_original_numbering=bool(data.get("keepOriginalNumbers", False)),
            style=dict(style) if isinstance(style, dict) else None,
        )


@dataclass(frozen=True)
class HistoryRecord:
    """
    Snapshot of one generation (immutable).

    Attributes:
        id: Unique record id
        timestamp: Creation time in epoch milliseconds
        title: Human readable title like "2 个文件生成的试卷"
        file_names: Names of the source files sent for extraction
        questions: Questions as they were after the generation
        latex: Rendered LaTeX for those questions
        options: Options used to render
    """

    id: str
    timestamp: int
    title: str
    file_names: tuple[str, ...] = ()
    questions: tuple[QuestionRecord, ...] = ()
    latex: str = ""
    options: HistoryOptions = field(default_factory=HistoryOptions)

    @classmethod
    def create(
        cls,
        *,
        title: str,
        file_names: Sequence[str],
        questions: Sequence[QuestionRecord],
        latex: str,
        options: HistoryOptions,
        timestamp: Optional[int] = None,
    ) -> HistoryRecord:
        """Build a new record with a fresh id, stamped now unless given."""
        return cls(
            id=uuid.uuid4().hex[:7],
            timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
            title=title,
            file_names=tuple(file_names),
            questions=tuple(questions),
            latex=latex,
            options=options,
        )

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON layout used by the history file."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "title": self.title,
            "fileNames": list(self.file_names),
            "questions": [q.to_dict() for q in self.questions],
            "latex": self.latex,
            "options": self.options.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HistoryRecord:
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            title=str(data.get("title", "")),
            file_names=tuple(data.get("fileNames", [])),
            questions=tuple(QuestionRecord.from_dict(q) for q in data.get("questions", [])),
            latex=str(data.get("latex", "")),
            options=HistoryOptions.from_dict(data.get("options", {})),
        )

    def __repr__(self) -> str:
        return (
            f"HistoryRecord({self.id!r}, title={self.title!r}, "
            f"questions={self.question_count})"
        )
