"""Artifact inspector — image dimensions, size and MIME type for files on disk.

Format and MIME type come from the file extension, not from content sniffing,
so a file with a misleading extension reports the extension's format.
"""

from __future__ import annotations

import base64
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from feedback_mcp.tools.errors import UnreadableImageError
from feedback_mcp.tools.types import ImageMetadata

logger = logging.getLogger(__name__)

register_heif_opener()

MIME_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(MIME_TYPES)

DEFAULT_MIME_TYPE = "image/jpeg"


def extension_of(path: str | os.PathLike[str]) -> str:
    return Path(path).suffix.lower()


def is_supported(path: str | os.PathLike[str]) -> bool:
    return extension_of(path) in SUPPORTED_EXTENSIONS


def mime_type_for(path: str | os.PathLike[str]) -> str:
    return MIME_TYPES.get(extension_of(path), DEFAULT_MIME_TYPE)


def _header_size(path: str | os.PathLike[str]) -> tuple[int, int]:
    # Image.open only parses the header, so the decompression bomb limit
    # would reject large images without ever decoding them.
    limit = Image.MAX_IMAGE_PIXELS
    Image.MAX_IMAGE_PIXELS = None
    try:
        with Image.open(path) as img:
            return img.size
    finally:
        Image.MAX_IMAGE_PIXELS = limit


def inspect_image(path: str | os.PathLike[str]) -> ImageMetadata:
    """Read dimensions and file stats without modifying the file.

    Raises:
        UnreadableImageError: the file cannot be stat'ed or decoded as an image.
    """
    try:
        stats = os.stat(path)
        width, height = _header_size(path)
    except (OSError, UnidentifiedImageError, ValueError) as e:
        raise UnreadableImageError(f"Cannot read image {path}: {e}") from e

    return ImageMetadata(
        width=width,
        height=height,
        size_bytes=stats.st_size,
        format=Path(path).suffix[1:],
        mime_type=mime_type_for(path),
        modified=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
    )


def load_base64(path: str | os.PathLike[str]) -> str:
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise UnreadableImageError(f"Cannot read image {path}: {e}") from e
    return base64.b64encode(raw).decode("ascii")
