"""
Module: builder.title

Purpose:
    Page-header title resolution and the auto-derived title policy.

    A title the user typed is kept verbatim forever. An empty title, or one
    that was itself derived, is re-derived from the question sources every
    time the question set changes: a single distinct source names the
    paper, anything else falls back to a dated default.

Key Functions:
    - default_title(): "<Y>年<M>月<D>日试卷"
    - derive_title(): Title from sources, else default_title()
    - resolve_title(): What the renderer prints
    - refresh_auto_title(): Apply the policy to a StyleConfig in place

Used By:
    - builder.output.renderer
    - builder.controller.ExamSession
"""

from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional

from examtex.core.models import QuestionRecord

from .config import StyleConfig

EXAM_PAPER_SUFFIX = "试卷"


def format_date(day: dt.date) -> str:
    """Chinese long date without zero padding, e.g. 2026年3月5日."""
    return f"{day.year}年{day.month}月{day.day}日"


def default_title(today: Optional[dt.date] = None) -> str:
    """Dated fallback title, e.g. ``2026年3月5日试卷``."""
    return format_date(today or dt.date.today()) + EXAM_PAPER_SUFFIX


def distinct_sources(questions: Iterable[QuestionRecord]) -> List[str]:
    """Non-empty sources in order of first appearance, without duplicates."""
    seen: List[str] = []
    for q in questions:
        source = q.source.strip()
        if source and source not in seen:
            seen.append(source)
    return seen


def derive_title(questions: Iterable[QuestionRecord], today: Optional[dt.date] = None) -> str:
    """Title from exactly one distinct source, otherwise the dated default."""
    sources = distinct_sources(questions)
    if len(sources) == 1:
        return sources[0]
    return default_title(today)


def resolve_title(
    questions: Iterable[QuestionRecord],
    header_title: str,
    today: Optional[dt.date] = None,
) -> str:
    """The title to print: header_title if set, otherwise derived."""
    if header_title:
        return header_title
    return derive_title(questions, today)


def refresh_auto_title(
    style: StyleConfig,
    questions: Iterable[QuestionRecord],
    today: Optional[dt.date] = None,
) -> bool:
    """
    Re-derive ``style.header_title`` after the question set changed.

    Only applies while the title is empty or still auto-derived; a title the
    user typed (``title_is_auto_derived`` False) is left alone whatever it
    contains. Nothing happens for an empty question set.

    Returns:
        True if style.header_title changed
    """
    questions = list(questions)
    if not questions:
        return False
    if style.header_title and not style.title_is_auto_derived:
        return False

    title = derive_title(questions, today)
    changed = title != style.header_title
    style.header_title = title
    style.title_is_auto_derived = True
    return changed
