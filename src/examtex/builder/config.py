"""
Module: builder.config

Purpose:
    Configuration dataclasses for the LaTeX assembly engine.

Key Classes:
    - StyleConfig: Mutable formatting options edited field by field
    - AssemblyOptions: Immutable layout switches (grouping, numbering)

Dependencies:
    - dataclasses (std)

Used By:
    - builder.output.renderer: Assembly engine
    - builder.title: Auto-derived title policy
    - builder.controller: ExamSession
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict


_STYLE_WIRE_KEYS = {
    "show_header_footer": "showHeaderFooter",
    "show_knowledge_point": "showKnowledgePoint",
    "show_source": "showSource",
    "header_title": "headerTitle",
    "title_is_auto_derived": "titleIsAutoDerived",
    "choice_gap": "choiceGap",
    "solution_gap": "solutionGap",
    "line_spacing": "lineSpacing",
}


@dataclass
class StyleConfig:
    """
    Formatting options for the generated paper (mutable).

    No cross-field validation: the renderer substitutes values verbatim and
    tolerates any combination.

    Attributes:
        show_header_footer: Emit fancyhdr page header/footer
        show_knowledge_point: Include the knowledge point in each item's meta
        show_source: Include the source in each item's meta
        header_title: Page header title; empty means "derive one"
        title_is_auto_derived: True while header_title was set by derivation
            rather than typed by the user
        choice_gap: Length after short-form questions, e.g. "2cm"
        solution_gap: Length after 解答题 questions, e.g. "6cm"
        line_spacing: setspace stretch multiplier

    Example:
        >>> style = StyleConfig()
        >>> style.choice_gap = "3cm"
        >>> style.set_header_title("期中考试")
        >>> style.title_is_auto_derived
        False
    """

    show_header_footer: bool = True
    show_knowledge_point: bool = True
    show_source: bool = True
    header_title: str = ""
    title_is_auto_derived: bool = False
    choice_gap: str = "2cm"
    solution_gap: str = "6cm"
    line_spacing: float = 1.5

    def set_header_title(self, value: str) -> None:
        """Record a title typed by the user; it will not be re-derived."""
        self.header_title = value
        self.title_is_auto_derived = False

    def copy(self) -> StyleConfig:
        return StyleConfig(**{f.name: getattr(self, f.name) for f in fields(self)})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys (history snapshot format)."""
        return {wire: getattr(self, attr) for attr, wire in _STYLE_WIRE_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StyleConfig:
        """Deserialize; unknown keys are ignored and missing keys default."""
        kwargs = {
            attr: data[wire]
            for attr, wire in _STYLE_WIRE_KEYS.items()
            if wire in data
        }
        return cls(**kwargs)


@dataclass(frozen=True)
class AssemblyOptions:
    """
    Layout switches for one assembly (immutable).

    Attributes:
        group_by_type: Partition output into one section per question type,
            in order of first appearance, each numbered from 1
        preserve_original_numbering: Emit each record's stored number as the
            item label instead of the automatic counter
    """

    group_by_type: bool = False
    preserve_original_numbering: bool = False
