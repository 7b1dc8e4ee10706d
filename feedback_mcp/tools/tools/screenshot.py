"""Screenshot tool — capture mode prompt, screen capture into a transient file, inline PNG result."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from feedback_mcp.tools.artifacts import transient_artifact
from feedback_mcp.tools.errors import CaptureFailedError, SubsystemError, UserCancelledError
from feedback_mcp.tools.inspector import inspect_image, load_base64
from feedback_mcp.tools.session import ToolSession
from feedback_mcp.tools.types import CaptureMode, ImagePart, InteractionOutcome, ToolResult, utc_timestamp

if TYPE_CHECKING:
    from feedback_mcp.native.base import NativeInteraction

logger = logging.getLogger(__name__)

CAPTURE_PROMPT = "Please choose screenshot type:"
CAPTURE_MIME_TYPE = "image/png"


async def prompt_capture_mode(native: NativeInteraction) -> InteractionOutcome:
    return await native.prompt_choice(
        CAPTURE_PROMPT,
        [m.value for m in CaptureMode],
        default=CaptureMode.SELECT_AREA.value,
    )


def capture_mode_from(label: str | None) -> CaptureMode:
    if label == CaptureMode.FULL_SCREEN.value:
        return CaptureMode.FULL_SCREEN
    return CaptureMode.SELECT_AREA


async def tool_take_screenshot(
    session: ToolSession,
) -> ToolResult:
    """Takes a screenshot of the screen (selected area or full screen) and returns it as an image."""
    chosen = await prompt_capture_mode(session.native)
    if chosen.is_cancelled:
        raise UserCancelledError("screenshot")
    if chosen.is_failed:
        raise SubsystemError(f"Screenshot type dialog failed: {chosen.reason}")
    mode = capture_mode_from(chosen.value)

    with transient_artifact(session.capture_dir) as path:
        captured = await session.native.capture(mode, path)
        if captured.is_failed:
            raise CaptureFailedError(captured.reason or "Screenshot failed")
        # screencapture exits 0 when the user presses Escape during area selection
        if not path.exists():
            raise CaptureFailedError("Screenshot failed or was cancelled")

        meta = inspect_image(path)
        data = load_base64(path)

    return ToolResult.report(
        "Screenshot completed",
        {
            "type": mode.value,
            "width": meta.width,
            "height": meta.height,
            "size_bytes": meta.size_bytes,
            "size_kb": meta.size_kb,
            "timestamp": utc_timestamp(),
        },
        image=ImagePart(data=data, mime_type=CAPTURE_MIME_TYPE),
    )
