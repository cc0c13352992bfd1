"""
Module: extraction.ports

Purpose:
    Interfaces of the external services that turn files or previously
    generated LaTeX into raw question payloads. Implementations live outside
    this package (they wrap a generative model); examtex only normalises and
    validates what they return.

Key Classes:
    - FilePayload: One prepared file (bytes + MIME type)
    - Extractor: files -> raw questions
    - LatexParser: LaTeX text -> raw questions
    - ExtractionError: Any collaborator failure, with a user-facing message
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence, runtime_checkable


class ExtractionError(Exception):
    """Extraction or import failed; ``str(error)`` is shown to the user."""
    pass


@dataclass(frozen=True)
class FilePayload:
    """
    A file ready to be sent to the extraction service.

    Attributes:
        name: Original file name (kept for history records)
        data: Encoded bytes
        mime_type: "image/jpeg" for images, "application/pdf" for PDFs
    """
    name: str
    data: bytes
    mime_type: str

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"


@runtime_checkable
class Extractor(Protocol):
    """Reads questions out of exam images/PDFs."""

    def extract(self, payloads: Sequence[FilePayload]) -> List[Dict[str, Any]] | Dict[str, Any]:
        """
        Return ``{"questions": [...]}`` (or the bare list) where each item
        has number, content, knowledgePoint and type.
        """
        ...


@runtime_checkable
class LatexParser(Protocol):
    """Re-interprets previously generated LaTeX as questions."""

    def parse(self, latex: str) -> List[Dict[str, Any]] | Dict[str, Any]:
        """
        Return ``{"questions": [...]}`` (or the bare list) where each item
        has number, content, knowledgePoint, source and type.
        """
        ...
