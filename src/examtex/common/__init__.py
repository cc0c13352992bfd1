"""Common utilities shared across the toolkit."""

from __future__ import annotations

from .knowledge import (
    COMMON_KNOWLEDGE_POINTS,
    normalise_knowledge_point,
    suggest_knowledge_points,
)

__all__ = [
    # knowledge
    "COMMON_KNOWLEDGE_POINTS",
    "normalise_knowledge_point",
    "suggest_knowledge_points",
    # modules imported on demand
    "paths",
]
