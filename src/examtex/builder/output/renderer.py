"""
Module: builder.output.renderer

Purpose:
    The document assembly engine: turn an ordered question sequence plus
    style and layout options into a complete XeLaTeX document.

    Pure and deterministic. The only environmental input is the current
    date, used for the fallback title; pass ``today`` to pin it.

Key Functions:
    - render_exam(): Full document (preamble + body)
    - render_body(): The enumerate list(s) only
    - format_question(): One ``\\item`` wrapped in a minipage
    - format_meta(): "(knowledge point, source)" fragment

Dependencies:
    - builder.output.templates: Preamble and header/footer fragments
    - builder.title: Title resolution

Used By:
    - builder.controller.ExamSession
    - examtex.cli
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, List, Optional, Sequence

from examtex.core.models import QuestionRecord

from ..config import AssemblyOptions, StyleConfig
from ..title import resolve_title
from .templates import build_preamble, header_footer_fragment

logger = logging.getLogger(__name__)

ENUMERATE_BEGIN = "\\begin{enumerate}[label=\\arabic*.]\n"
ENUMERATE_END = "\\end{enumerate}\n"
DOCUMENT_BEGIN = "\\begin{document}\n\n"
DOCUMENT_END = "\n\\end{document}"


def format_meta(question: QuestionRecord, style: StyleConfig) -> str:
    """
    Parenthesised meta fragment, e.g. ``(导数, 2024 期中)``.

    Knowledge point then source, each only when enabled and non-empty.
    Returns "" when neither applies.
    """
    parts: List[str] = []
    if style.show_knowledge_point and question.knowledge_point:
        parts.append(question.knowledge_point)
    if style.show_source and question.source:
        parts.append(question.source)
    return f"({', '.join(parts)})" if parts else ""


def format_label(question: QuestionRecord, options: AssemblyOptions) -> str:
    """Explicit ``[n.]`` item label, or "" to let enumerate count."""
    if options.preserve_original_numbering:
        return f"[{question.number}.]"
    return ""


def format_question(
    question: QuestionRecord,
    style: StyleConfig,
    options: AssemblyOptions,
) -> str:
    """
    Render one question as an enumerate item.

    The item body sits in a top-aligned full-width minipage so a question is
    never split across pages. 解答题 put the content on its own line after
    the meta fragment and end with ``\\solutiongap``; every other type is
    inline and ends with ``\\choicegap``.
    """
    label = format_label(question, options)
    meta = format_meta(question, style)
    head = f"  \\item{label} \\begin{{minipage}}[t]{{\\linewidth}} {meta}"

    if question.is_solution:
        return (
            f"{head} \\\\ \n"
            f"  {question.content}\n"
            f"  \\vspace{{\\solutiongap}} \\end{{minipage}}\n"
        )
    return (
        f"{head} {question.content}\n"
        f"  \\vspace{{\\choicegap}} \\end{{minipage}}\n"
    )


def group_by_type(questions: Sequence[QuestionRecord]) -> Dict[str, List[QuestionRecord]]:
    """Partition by type; keys in first-seen order, members in input order."""
    groups: Dict[str, List[QuestionRecord]] = {}
    for q in questions:
        groups.setdefault(q.type, []).append(q)
    return groups


def render_body(
    questions: Sequence[QuestionRecord],
    style: StyleConfig,
    options: AssemblyOptions,
) -> str:
    """
    Render the question list(s).

    Grouped output has one ``\\section*{<type>}`` per distinct type, each with
    its own enumerate so numbering restarts at 1. Ungrouped output is a
    single enumerate numbered 1..N.
    """
    if options.group_by_type:
        body = ""
        for type_label, members in group_by_type(questions).items():
            body += f"\\section*{{{type_label}}}\n"
            body += ENUMERATE_BEGIN
            body += "".join(format_question(q, style, options) for q in members)
            body += ENUMERATE_END + "\n"
        return body

    body = ENUMERATE_BEGIN
    body += "".join(format_question(q, style, options) for q in questions)
    body += ENUMERATE_END
    return body


def render_preamble(
    questions: Sequence[QuestionRecord],
    style: StyleConfig,
    today: Optional[dt.date] = None,
) -> str:
    """Preamble with resolved title, gaps, spacing and header/footer."""
    title = resolve_title(questions, style.header_title, today)
    return build_preamble(
        title=title,
        choice_gap=style.choice_gap,
        solution_gap=style.solution_gap,
        line_spacing=style.line_spacing,
        header_footer=header_footer_fragment(title, style.show_header_footer),
    )


def render_exam(
    questions: Sequence[QuestionRecord],
    style: StyleConfig,
    options: Optional[AssemblyOptions] = None,
    *,
    today: Optional[dt.date] = None,
) -> str:
    """
    Assemble the complete LaTeX document.

    Args:
        questions: Questions in output order
        style: Formatting options (values substituted verbatim)
        options: Grouping/numbering switches
        today: Date used for the fallback title (defaults to today)

    Returns:
        The document text, or "" when there are no questions

    Example:
        >>> latex = render_exam(store.records, StyleConfig(), AssemblyOptions())
        >>> latex.endswith("\\\\end{document}")
        True
    """
    if not questions:
        return ""
    options = options or AssemblyOptions()

    preamble = render_preamble(questions, style, today)
    body = render_body(questions, style, options)

    logger.debug(
        f"Rendered {len(questions)} questions "
        f"(grouped={options.group_by_type}, original_numbers={options.preserve_original_numbering})"
    )
    return preamble + DOCUMENT_BEGIN + body + DOCUMENT_END
