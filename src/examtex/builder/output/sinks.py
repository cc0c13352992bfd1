"""
Module: builder.output.sinks

Purpose:
    Places the assembled LaTeX can be sent. None of these touch the question
    store or session state.

Key Functions:
    - write_tex(): Save as a .tex file
    - copy_to_clipboard(): Put the text on the system clipboard (Qt)
    - build_overleaf_form() / open_in_overleaf(): One-shot form post that
      opens the document in Overleaf with the XeLaTeX engine

Dependencies:
    - PySide6: System clipboard access
    - webbrowser (std): Opens the Overleaf hand-off page
"""

from __future__ import annotations

import html
import logging
import os
import sys
import tempfile
import webbrowser
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

TEX_FILENAME = "exam_paper.tex"
OVERLEAF_URL = "https://www.overleaf.com/docs"
_DISPLAY_ENV_VARS = ("DISPLAY", "WAYLAND_DISPLAY", "QT_QPA_PLATFORM")


class SinkError(Exception):
    """Error while exporting the document."""
    pass


def write_tex(text: str, directory: Path, filename: str = TEX_FILENAME) -> Path:
    """
    Write the document to ``directory/filename``.

    The extension is forced to .tex.

    Returns:
        Path of the written file

    Raises:
        SinkError: If the file cannot be written
    """
    path = Path(directory) / Path(filename).with_suffix(".tex").name
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise SinkError(f"Could not write {path}: {e}") from e
    logger.info(f"Wrote {path}")
    return path


def _display_available() -> bool:
    """False on Linux when no X11/Wayland display or Qt platform is configured."""
    if not sys.platform.startswith("linux"):
        return True
    return any(os.environ.get(name) for name in _DISPLAY_ENV_VARS)


def copy_to_clipboard(text: str) -> None:
    """
    Copy the document to the system clipboard.

    Reuses the running Qt application when there is one; otherwise a
    QGuiApplication is created for the duration of the call.

    Raises:
        SinkError: If the clipboard cannot be reached through Qt
    """
    try:
        from PySide6.QtGui import QGuiApplication
    except ImportError as e:
        raise SinkError(f"Qt is not available for clipboard access: {e}") from e

    app = QGuiApplication.instance()
    if app is None:
        if not _display_available():
            raise SinkError("No display available for clipboard access")
        try:
            app = QGuiApplication([])
        except RuntimeError as e:
            raise SinkError(f"Could not start Qt for clipboard access: {e}") from e
    clipboard = app.clipboard()
    if clipboard is None:
        raise SinkError("System clipboard is not available")
    clipboard.setText(text)
    logger.info(f"Copied {len(text)} characters to clipboard")


def build_overleaf_form(text: str, filename: str = TEX_FILENAME) -> str:
    """
    HTML page that immediately POSTs the document to Overleaf.

    Overleaf picks the compiler from the ``% !TEX program = xelatex`` magic
    comment at the top of the preamble.
    """
    return (
        "<!DOCTYPE html>\n"
        "<html><head><meta charset=\"utf-8\"><title>Open in Overleaf</title></head>\n"
        "<body onload=\"document.forms[0].submit()\">\n"
        f"<form method=\"POST\" action=\"{OVERLEAF_URL}\">\n"
        f"<textarea name=\"snip\" hidden>{html.escape(text)}</textarea>\n"
        f"<input type=\"hidden\" name=\"snip_name\" value=\"{html.escape(filename, quote=True)}\">\n"
        "<noscript><button type=\"submit\">Open in Overleaf</button></noscript>\n"
        "</form>\n"
        "</body></html>\n"
    )


def open_in_overleaf(text: str, directory: Optional[Path] = None) -> Path:
    """
    Write the Overleaf hand-off page and open it in the default browser.

    Returns:
        Path of the written HTML page
    """
    page = build_overleaf_form(text)
    if directory is None:
        directory = Path(tempfile.mkdtemp(prefix="examtex_"))
    path = Path(directory) / "open_in_overleaf.html"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(page, encoding="utf-8")
    except OSError as e:
        raise SinkError(f"Could not write {path}: {e}") from e

    if not webbrowser.open(path.as_uri()):
        raise SinkError("No web browser available to open Overleaf")
    logger.info("Opened document in Overleaf")
    return path
