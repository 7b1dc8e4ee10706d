"""Tool dispatcher — routes tool calls to the correct handler function."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Coroutine

from feedback_mcp.tools.errors import (
    ErrorCode,
    HandlerError,
    MissingArgumentError,
    ToolError,
    UnknownToolError,
)
from feedback_mcp.tools.session import ToolSession
from feedback_mcp.tools.tools.feedback import tool_collect_feedback
from feedback_mcp.tools.tools.images import tool_get_image_info, tool_pick_image
from feedback_mcp.tools.tools.screenshot import tool_take_screenshot
from feedback_mcp.tools.types import ToolResult

logger = logging.getLogger(__name__)

ToolHandler = Callable[..., Coroutine[Any, Any, ToolResult]]

# Catalog order is the order tools are advertised in.
TOOL_HANDLERS: dict[str, ToolHandler] = {
    "collect_feedback": tool_collect_feedback,
    "pick_image": tool_pick_image,
    "get_image_info": tool_get_image_info,
    "take_screenshot": tool_take_screenshot,
}

TOOL_NAMES: list[str] = list(TOOL_HANDLERS)


def _bind_arguments(
    tool_name: str,
    handler: ToolHandler,
    session: ToolSession,
    tool_input: dict[str, Any],
) -> dict[str, Any]:
    params = inspect.signature(handler).parameters
    named = {
        name: p for name, p in params.items()
        if p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    }
    accepts_any = any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values())

    kwargs: dict[str, Any] = {"session": session}
    for key, value in tool_input.items():
        if key == "session":
            continue
        if key in named or accepts_any:
            kwargs[key] = value
        else:
            logger.debug("Ignoring argument %r not accepted by %s", key, tool_name)

    for name, param in named.items():
        if name not in kwargs and param.default is inspect.Parameter.empty:
            raise MissingArgumentError(name)
    return kwargs


async def dispatch(
    tool_name: str,
    tool_input: dict[str, Any] | None,
    session: ToolSession,
) -> ToolResult:
    """Run one tool call to completion.

    Returns the handler's result unchanged, or raises ToolError. Handler
    failures of any kind never escape as anything other than ToolError.
    """
    tool_input = tool_input or {}
    logger.info("Tool call: %s with args: %r", tool_name, tool_input)

    handler = TOOL_HANDLERS.get(tool_name)
    if handler is None:
        logger.warning("Unknown tool requested: %s", tool_name)
        raise UnknownToolError(tool_name, TOOL_NAMES)

    try:
        kwargs = _bind_arguments(tool_name, handler, session, tool_input)
        async with session.dialog_turn():
            return await handler(**kwargs)
    except HandlerError as e:
        if e.code is ErrorCode.USER_CANCELLED:
            logger.info("Tool %s cancelled by user", tool_name)
        else:
            logger.warning("Tool %s failed: %s", tool_name, e)
        raise ToolError(tool_name, str(e), code=e.code) from e
    except Exception as e:
        logger.exception("Tool %s failed", tool_name)
        raise ToolError(tool_name, f"{type(e).__name__}: {e}") from e
