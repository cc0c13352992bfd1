"""
Module: builder.output.templates

Purpose:
    The fixed XeLaTeX preamble and strict placeholder substitution.

    Placeholders look like ``__NAME__``. Substitution is a single pass over
    the template, so substituted values are never themselves scanned for
    placeholders. Every placeholder must occur exactly once in the template
    and every supplied value must be consumed exactly once.

Key Functions:
    - substitute(): Strict single-pass placeholder replacement
    - header_footer_fragment(): fancyhdr configuration or \\pagestyle{empty}

Used By:
    - builder.output.renderer
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Mapping

PLACEHOLDER_RE = re.compile(r"__([A-Z][A-Z0-9_]*?)__")

PREAMBLE_PLACEHOLDERS = frozenset({
    "EXAM_TITLE",
    "CHOICE_GAP",
    "SOLUTION_GAP",
    "LINE_SPACING",
    "FANCY_HDR_CONFIG",
})

PREAMBLE_TEMPLATE = r"""
% !TEX program = xelatex
\documentclass[11pt, a4paper]{article}
\usepackage[UTF8]{ctex}
\usepackage{amsmath, amssymb, amsthm}
\usepackage{geometry}
\usepackage{enumitem}
\usepackage{fancyhdr}
\usepackage{cases}
\usepackage{graphicx}
\usepackage{textcomp}
\usepackage{tikz}
\usepackage{pgfplots}
\usepackage{setspace} % 控制行间距
\pgfplotsset{compat=1.18}
\usetikzlibrary{calc, intersections, through, backgrounds, arrows.meta, shapes.geometric}

% ==========================================
% 试卷排版配置
% ==========================================
\newcommand{\examtitle}{__EXAM_TITLE__}
\newcommand{\choicegap}{__CHOICE_GAP__}
\newcommand{\solutiongap}{__SOLUTION_GAP__}
\setstretch{__LINE_SPACING__} % 设置段落行间距倍率
% ==========================================

% 页面设置
\geometry{left=2cm, right=2cm, top=2.5cm, bottom=2.5cm}

% 页眉页脚设置
__FANCY_HDR_CONFIG__

% 自定义命令
\newcommand{\blank}[1]{\underline{\makebox[#1][c]{}}}
\newcommand{\fillin}{\blank{2cm}}

% 全局统一数学环境字号
\everymath{\displaystyle}
"""

NO_HEADER_FOOTER = r"\pagestyle{empty}"


class TemplateError(Exception):
    """Template and substitution values do not match one-to-one."""
    pass


def substitute(template: str, values: Mapping[str, str]) -> str:
    """
    Replace every ``__NAME__`` placeholder with ``values[NAME]``.

    Raises:
        TemplateError: If a placeholder occurs more than once, has no value,
            or a value has no placeholder
    """
    counts = Counter(PLACEHOLDER_RE.findall(template))

    duplicated = sorted(name for name, n in counts.items() if n > 1)
    if duplicated:
        raise TemplateError(f"Placeholders occur more than once: {duplicated}")

    missing = sorted(set(counts) - set(values))
    if missing:
        raise TemplateError(f"No value for placeholders: {missing}")

    unused = sorted(set(values) - set(counts))
    if unused:
        raise TemplateError(f"Values without a placeholder: {unused}")

    return PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], template)


def header_footer_fragment(title: str, enabled: bool) -> str:
    """
    fancyhdr configuration with the title centred in the header and the
    page number centred in the footer, or ``\\pagestyle{empty}``.
    """
    if not enabled:
        return NO_HEADER_FOOTER
    return "\n".join([
        r"\pagestyle{fancy}",
        r"\fancyhf{}",
        rf"\fancyhead[C]{{{title}}}",
        r"\fancyfoot[C]{第 \thepage 页}",
    ])


def format_line_spacing(value: float) -> str:
    """Render the stretch factor like JavaScript would: 1.0 -> "1", 1.5 -> "1.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_preamble(
    title: str,
    choice_gap: str,
    solution_gap: str,
    line_spacing: float,
    header_footer: str,
) -> str:
    """Fill PREAMBLE_TEMPLATE."""
    return substitute(PREAMBLE_TEMPLATE, {
        "EXAM_TITLE": title,
        "CHOICE_GAP": choice_gap,
        "SOLUTION_GAP": solution_gap,
        "LINE_SPACING": format_line_spacing(line_spacing),
        "FANCY_HDR_CONFIG": header_footer,
    })
