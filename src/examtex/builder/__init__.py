"""
Module: builder

Purpose:
    Question store, style configuration and the LaTeX assembly engine that
    turns edited questions into an exam paper.

Key Functions:
    - render_exam(): Questions + style + options -> LaTeX document

Key Classes:
    - QuestionStore: Ordered, id-addressed question rows
    - StyleConfig / AssemblyOptions: Rendering configuration
    - ExamSession: Pull-based orchestration used by front-ends

Dependencies:
    - examtex.core.models: QuestionRecord, HistoryRecord
    - examtex.extraction: Collaborator ports
    - examtex.history: Generation history
"""

from .config import StyleConfig, AssemblyOptions
from .store import QuestionStore, AppendMode
from .title import derive_title, default_title, refresh_auto_title, resolve_title
from .output import render_exam, TemplateError
from .controller import ExamSession, ExamSessionError, GenerationResult

__all__ = [
    # Config
    "StyleConfig",
    "AssemblyOptions",
    # Store
    "QuestionStore",
    "AppendMode",
    # Title
    "derive_title",
    "default_title",
    "refresh_auto_title",
    "resolve_title",
    # Rendering
    "render_exam",
    "TemplateError",
    # Controller
    "ExamSession",
    "ExamSessionError",
    "GenerationResult",
]
