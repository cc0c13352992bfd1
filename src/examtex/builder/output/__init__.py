"""
Output Package

LaTeX assembly engine, preamble template and export sinks.
"""

from .renderer import render_exam, render_body, format_question, format_meta
from .templates import TemplateError, substitute
from .sinks import write_tex, copy_to_clipboard, open_in_overleaf, SinkError

__all__ = [
    "render_exam",
    "render_body",
    "format_question",
    "format_meta",
    "TemplateError",
    "substitute",
    "write_tex",
    "copy_to_clipboard",
    "open_in_overleaf",
    "SinkError",
]
