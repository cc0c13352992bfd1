"""
Module: extraction.normalize

Purpose:
    Turn raw collaborator payloads into QuestionRecord rows.

    Defaults: number -> 1-based position, knowledge point -> 未分类,
    type -> 其他, source -> today's ISO date (imports keep their own
    source when present). Content cleanup: literal ``\\n`` escapes become
    LaTeX line breaks; for 填空题 underscore runs, empty full-width
    parentheses and bare ``\\fillin`` become ``$\\fillin$``.

Key Functions:
    - clean_content(): Content cleanup for one question
    - normalize_extracted(): Extractor output -> records
    - normalize_imported(): LatexParser output -> records
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from examtex.common.knowledge import normalise_knowledge_point
from examtex.core.models import QuestionRecord, QuestionType, new_question_id
from examtex.core.schemas import ValidationError, validate_extraction_response

from .ports import ExtractionError

logger = logging.getLogger(__name__)

FILLIN = r"$\fillin$"

_LITERAL_NEWLINE_RE = re.compile(r"\\n(?![a-zA-Z])")
_UNDERSCORE_BLANK_RE = re.compile(r"_{3,}")
_PAREN_BLANK_RE = re.compile(r"（\s*）")
_BARE_FILLIN_RE = re.compile(r"(?<!\$)\\fillin(?!\$)")


def clean_content(content: str, question_type: str) -> str:
    r"""
    Normalise LaTeX content returned by the model.

    Example:
        >>> clean_content(r"已知 ____ 成立", "填空题")
        '已知 $\\fillin$ 成立'
    """
    content = _LITERAL_NEWLINE_RE.sub(lambda m: "\\\\", content)
    if question_type == QuestionType.FILL_IN:
        content = _UNDERSCORE_BLANK_RE.sub(lambda m: FILLIN, content)
        content = _PAREN_BLANK_RE.sub(lambda m: FILLIN, content)
        content = _BARE_FILLIN_RE.sub(lambda m: FILLIN, content)
    return content


def _question_rows(raw: Any) -> List[Dict[str, Any]]:
    if isinstance(raw, list):
        raw = {"questions": raw}
    try:
        validate_extraction_response(raw)
    except ValidationError as e:
        raise ExtractionError(f"识别结果格式不正确：{e}") from e
    return raw["questions"]


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _to_record(
    row: Dict[str, Any],
    position: int,
    *,
    id_prefix: str,
    source: str,
    clean: bool,
) -> QuestionRecord:
    question_type = _text(row.get("type")).strip() or QuestionType.OTHER
    content = _text(row.get("content"))
    if clean:
        content = clean_content(content, question_type)
    return QuestionRecord(
        id=new_question_id(id_prefix),
        number=_text(row.get("number")).strip() or str(position),
        content=content,
        knowledge_point=normalise_knowledge_point(_text(row.get("knowledgePoint"))),
        source=source,
        type=question_type,
    )


def normalize_extracted(raw: Any, today: Optional[dt.date] = None) -> List[QuestionRecord]:
    """
    Records from an Extractor response.

    Every record's source is today's ISO date.

    Raises:
        ExtractionError: If the response shape is invalid
    """
    source = (today or dt.date.today()).isoformat()
    rows = _question_rows(raw)
    records = [
        _to_record(row, i + 1, id_prefix="q", source=source, clean=True)
        for i, row in enumerate(rows)
    ]
    logger.info(f"Normalized {len(records)} extracted questions")
    return records


def normalize_imported(raw: Any, today: Optional[dt.date] = None) -> List[QuestionRecord]:
    """
    Records from a LatexParser response.

    Content is kept as-is; a missing source becomes today's ISO date.

    Raises:
        ExtractionError: If the response shape is invalid
    """
    fallback_source = (today or dt.date.today()).isoformat()
    rows: Sequence[Dict[str, Any]] = _question_rows(raw)
    records = [
        _to_record(
            row,
            i + 1,
            id_prefix="imported",
            source=_text(row.get("source")).strip() or fallback_source,
            clean=False,
        )
        for i, row in enumerate(rows)
    ]
    logger.info(f"Normalized {len(records)} imported questions")
    return records
