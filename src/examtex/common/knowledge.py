"""
Module: common.knowledge

Purpose:
    Vocabulary of common high-school mathematics knowledge points offered as
    suggestions when tagging questions, plus helpers to normalise a tag and
    look up suggestions.

Key Functions:
    - normalise_knowledge_point(): Collapse whitespace, fall back to 未分类
    - suggest_knowledge_points(): Suggestions matching a typed prefix/substring

Used By:
    - examtex.extraction.normalize: Default tag for extracted questions
    - examtex.cli: ``kp`` command
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from examtex.core.models.questions import DEFAULT_KNOWLEDGE_POINT


__all__ = [
    "COMMON_KNOWLEDGE_POINTS",
    "normalise_knowledge_point",
    "suggest_knowledge_points",
]


COMMON_KNOWLEDGE_POINTS: tuple[str, ...] = (
    "集合与常用逻辑用语",
    "复数代数形式的运算",
    "基本不等式",
    "函数的概念与性质",
    "指数函数与对数函数",
    "导数的几何意义",
    "利用导数研究函数的单调性与极值",
    "三角函数的图像与性质",
    "三角恒等变换",
    "解三角形",
    "平面向量的线性运算",
    "等差数列与等比数列",
    "立体几何：垂直与平行",
    "直线与圆的方程",
    "椭圆的定义与标准方程",
    "双曲线的性质",
    "抛物线的几何性质",
    "概率与古典概型",
    "分层抽样与统计图表",
    "排列组合",
    "二项式定理",
)

_WS_RE = re.compile(r"\s+")


def normalise_knowledge_point(value: Optional[str]) -> str:
    """
    Normalise a knowledge point tag.

    Example:
        >>> normalise_knowledge_point("  导数的 几何意义 ")
        '导数的 几何意义'
        >>> normalise_knowledge_point(None)
        '未分类'
    """
    if not value or not value.strip():
        return DEFAULT_KNOWLEDGE_POINT
    return _WS_RE.sub(" ", value.strip())


def suggest_knowledge_points(
    query: str = "",
    vocabulary: Iterable[str] = COMMON_KNOWLEDGE_POINTS,
    limit: Optional[int] = None,
) -> List[str]:
    """
    Return vocabulary entries matching ``query``.

    Prefix matches come first, then substring matches, each in vocabulary
    order. An empty query returns the whole vocabulary.
    """
    query = query.strip()
    entries = list(vocabulary)
    if not query:
        matches = entries
    else:
        prefix = [kp for kp in entries if kp.startswith(query)]
        inner = [kp for kp in entries if query in kp and kp not in prefix]
        matches = prefix + inner
    return matches[:limit] if limit is not None else matches
