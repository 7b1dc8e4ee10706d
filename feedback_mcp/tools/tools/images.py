"""Image tools — pick an image with the native file picker, or inspect one by path."""

from __future__ import annotations

import logging
import os

from feedback_mcp.tools.errors import (
    ImageNotFoundError,
    MissingArgumentError,
    SubsystemError,
    UnsupportedFormatError,
    UserCancelledError,
)
from feedback_mcp.tools.inspector import extension_of, inspect_image, is_supported, load_base64
from feedback_mcp.tools.session import ToolSession
from feedback_mcp.tools.types import ImagePart, ToolResult, utc_timestamp

logger = logging.getLogger(__name__)

PICKER_PROMPT = "Please select an image file"
IMAGE_TYPE_IDENTIFIERS = ("public.image",)


async def tool_pick_image(
    session: ToolSession,
) -> ToolResult:
    """Allows the user to select a single image via native macOS file picker."""
    logger.info("Opening native file picker")
    picked = await session.native.pick_file(PICKER_PROMPT, IMAGE_TYPE_IDENTIFIERS)
    if picked.is_failed:
        raise SubsystemError(f"File picker failed: {picked.reason}")
    if picked.is_cancelled or not picked.value:
        raise UserCancelledError("image selection")

    selected = picked.value
    if not os.path.exists(selected):
        raise ImageNotFoundError(selected)
    if not is_supported(selected):
        raise UnsupportedFormatError(extension_of(selected))

    meta = inspect_image(selected)
    data = load_base64(selected)

    return ToolResult.report(
        "Image selection completed",
        {
            "selected_image_path": selected,
            "filename": os.path.basename(selected),
            "format": meta.format.lower(),
            "width": meta.width,
            "height": meta.height,
            "size_bytes": meta.size_bytes,
            "size_kb": meta.size_kb,
            "timestamp": utc_timestamp(),
        },
        image=ImagePart(data=data, mime_type=meta.mime_type),
    )


async def tool_get_image_info(
    session: ToolSession,
    image_path: str,
) -> ToolResult:
    """Retrieves information (dimensions, format, size) about a local image file.

    Args:
        image_path: The absolute path to the local image file.
    """
    if not isinstance(image_path, str) or not image_path.strip():
        raise MissingArgumentError("image_path")

    resolved = session.resolve_path(image_path)
    if not os.path.exists(resolved):
        raise ImageNotFoundError(image_path)

    meta = inspect_image(resolved)
    data = load_base64(resolved)

    return ToolResult.report(
        "Image information",
        {
            "filename": os.path.basename(resolved),
            "format": meta.format,
            "width": meta.width,
            "height": meta.height,
            "size_bytes": meta.size_bytes,
            "size_kb": meta.size_kb,
            "modified": meta.modified.isoformat(),
            "path": resolved,
        },
        image=ImagePart(data=data, mime_type=meta.mime_type),
    )
