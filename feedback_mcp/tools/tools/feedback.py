"""Feedback tool — free-text feedback dialog with an optional image or screenshot attachment."""

from __future__ import annotations

import logging

from feedback_mcp.tools.artifacts import unique_capture_path
from feedback_mcp.tools.errors import SubsystemError, UserCancelledError
from feedback_mcp.tools.session import ToolSession
from feedback_mcp.tools.tools.images import IMAGE_TYPE_IDENTIFIERS, PICKER_PROMPT
from feedback_mcp.tools.tools.screenshot import capture_mode_from, prompt_capture_mode
from feedback_mcp.tools.types import ImageChoice, InteractionOutcome, ToolResult, utc_timestamp

logger = logging.getLogger(__name__)

NO_WORK_SUMMARY = "No work summary"
FEEDBACK_PROMPT = "Please enter your feedback, suggestions, or comments:"
FEEDBACK_TIPS = (
    "Tips:\n"
    "• You can paste multi-line text directly\n"
    "• Line breaks will be preserved\n"
    "• Supports Cmd+A to select all, Cmd+C to copy, Cmd+V to paste"
)
ATTACH_PROMPT = "Would you like to add an image?"


def _feedback_message(work_summary: str | None) -> str:
    parts = []
    if work_summary:
        parts.append(f"Work summary:\n{work_summary}")
    parts.append(FEEDBACK_PROMPT)
    parts.append(FEEDBACK_TIPS)
    return "\n\n".join(parts)


async def tool_collect_feedback(
    session: ToolSession,
    work_summary: str | None = None,
) -> ToolResult:
    """Collects user feedback (text and/or images) via native macOS dialogs.

    Args:
        work_summary: AI's summary of work completed. Displayed to the user.
    """
    entered = await session.native.prompt_text(session.dialog_title, _feedback_message(work_summary))
    if entered.is_failed:
        raise SubsystemError(f"Feedback dialog failed: {entered.reason}")
    feedback = (entered.value or "").strip() if entered.is_value else ""
    if not feedback:
        raise UserCancelledError("feedback input")

    image_path = await _attach_image(session)

    return ToolResult.report(
        "User feedback collection completed",
        {
            "feedback": feedback,
            "image_path": image_path,
            "timestamp": utc_timestamp(),
            "work_summary": work_summary or NO_WORK_SUMMARY,
        },
    )


async def _attach_image(session: ToolSession) -> str | None:
    """Optional attachment step. Every failure here degrades to no image."""
    choice = await session.native.prompt_choice(
        ATTACH_PROMPT,
        [c.value for c in ImageChoice],
        default=ImageChoice.SKIP.value,
        cancellable=False,
    )
    if choice.is_failed:
        logger.warning("Image choice dialog failed, continuing without image: %s", choice.reason)
        return None
    if choice.is_cancelled:
        return None

    if choice.value == ImageChoice.SELECT_IMAGE.value:
        return await _select_image(session)
    if choice.value == ImageChoice.SCREENSHOT.value:
        return await _capture_screenshot(session)
    return None


async def _select_image(session: ToolSession) -> str | None:
    picked = await session.native.pick_file(PICKER_PROMPT, IMAGE_TYPE_IDENTIFIERS)
    if picked.is_failed:
        logger.warning("Image selection error: %s", picked.reason)
        return None
    if picked.is_cancelled:
        logger.info("Image selection cancelled")
        return None
    return picked.value or None


async def _capture_screenshot(session: ToolSession) -> str | None:
    chosen = await prompt_capture_mode(session.native)
    if chosen.is_cancelled:
        return None
    if chosen.is_failed:
        logger.warning("Screenshot type dialog failed: %s", chosen.reason)
        return None

    # Kept on disk: the feedback result refers to the screenshot by path.
    path = unique_capture_path(session.capture_dir, prefix="feedback-screenshot")
    try:
        session.capture_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        captured = InteractionOutcome.failed(f"Cannot create capture directory {session.capture_dir}: {e}")
    else:
        captured = await session.native.capture(capture_mode_from(chosen.value), path)

    if captured.is_failed:
        reason = captured.reason or "Screenshot failed"
    elif not path.exists():
        reason = "Screenshot was cancelled by user"
    else:
        return str(path)

    logger.warning("Screenshot error: %s", reason)
    await session.native.alert("Screenshot Failed", reason)
    return None
