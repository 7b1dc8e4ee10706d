from __future__ import annotations

import logging

from feedback_mcp.config import Settings, get_settings
from feedback_mcp.native.macos import MacOSInteraction
from feedback_mcp.server import serve
from feedback_mcp.tools.session import ToolSession

logger = logging.getLogger(__name__)


def create_session(settings: Settings) -> ToolSession:
    native = MacOSInteraction(timeout=settings.DIALOG_TIMEOUT_SECONDS)
    return ToolSession(native, settings)


async def main(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logger.info("Setting up MCP server %s %s", settings.SERVER_NAME, settings.SERVER_VERSION)
    session = create_session(settings)
    await serve(session, settings)
