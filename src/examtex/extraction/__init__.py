"""
Extraction Package

Ports for the external question extraction / LaTeX import services, file
payload preparation, and normalisation of their raw output.
"""

from .ports import ExtractionError, Extractor, FilePayload, LatexParser
from .normalize import clean_content, normalize_extracted, normalize_imported
from .payloads import load_payload, load_payloads

__all__ = [
    "ExtractionError",
    "Extractor",
    "FilePayload",
    "LatexParser",
    "clean_content",
    "normalize_extracted",
    "normalize_imported",
    "load_payload",
    "load_payloads",
]
