"""
Module: extraction.payloads

Purpose:
    Prepare user files for the extraction service. Images are downscaled so
    the longest side is at most MAX_IMAGE_SIDE and re-encoded as JPEG;
    PDFs are passed through untouched.

Key Functions:
    - prepare_image(): Downscale + JPEG encode image bytes
    - load_payload(): Path -> FilePayload
    - load_payloads(): Ordered list of paths -> payloads

Dependencies:
    - PIL: Image decoding, resizing and JPEG encoding
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterable, List

from PIL import Image, UnidentifiedImageError

from .ports import ExtractionError, FilePayload

logger = logging.getLogger(__name__)

MAX_IMAGE_SIDE = 1200
JPEG_QUALITY = 85

IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif", ".tif", ".tiff"})
PDF_SUFFIX = ".pdf"


def scaled_size(width: int, height: int, max_side: int = MAX_IMAGE_SIDE) -> tuple[int, int]:
    """
    Size that fits in ``max_side`` x ``max_side`` keeping aspect ratio.

    Example:
        >>> scaled_size(2400, 1800)
        (1200, 900)
        >>> scaled_size(800, 600)
        (800, 600)
    """
    if width <= max_side and height <= max_side:
        return width, height
    if width > height:
        return max_side, round(height * max_side / width)
    return round(width * max_side / height), max_side


def prepare_image(data: bytes) -> bytes:
    """
    Decode, downscale and re-encode an image as JPEG.

    Raises:
        ExtractionError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            size = scaled_size(*img.size)
            if size != img.size:
                img = img.resize(size, Image.Resampling.LANCZOS)
            if img.mode != "RGB":
                img = img.convert("RGB")
            out = io.BytesIO()
            img.save(out, format="JPEG", quality=JPEG_QUALITY)
    except (UnidentifiedImageError, OSError) as e:
        raise ExtractionError(f"无法读取图片：{e}") from e
    return out.getvalue()


def load_payload(path: Path) -> FilePayload:
    """
    Read one file as a FilePayload.

    Raises:
        ExtractionError: For unsupported file types or unreadable files
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in IMAGE_SUFFIXES and suffix != PDF_SUFFIX:
        raise ExtractionError(f"不支持的文件类型：{path.name}")
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ExtractionError(f"无法读取文件 {path.name}：{e}") from e

    if suffix == PDF_SUFFIX:
        return FilePayload(name=path.name, data=data, mime_type="application/pdf")

    jpeg = prepare_image(data)
    logger.debug(f"Prepared {path.name}: {len(data)} -> {len(jpeg)} bytes")
    return FilePayload(name=path.name, data=jpeg, mime_type="image/jpeg")


def load_payloads(paths: Iterable[Path]) -> List[FilePayload]:
    """Load files in the given (user-chosen) order."""
    return [load_payload(p) for p in paths]
