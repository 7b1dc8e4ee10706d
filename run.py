"""Interactive Feedback MCP — entry point.

Runs the MCP server over stdio. Protocol frames use stdout; all logging goes
to stderr (and optionally a rotating file under FEEDBACK_MCP_LOG_DIR).

Exit codes:
  0  client closed the connection, or SIGINT / SIGTERM received
  1  any uncaught error during setup or while serving
"""

from __future__ import annotations

import asyncio
import logging
import os
import platform
import signal
import sys

from feedback_mcp.config import Settings, get_settings
from feedback_mcp.main import main as serve_main
from feedback_mcp.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def on_exit_signal(signame: str) -> None:
    logger.info("Received %s, cleaning up...", signame)
    logging.shutdown()
    os._exit(0)


async def _run(settings: Settings) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, on_exit_signal, sig.name)
    await serve_main(settings)


def main() -> None:
    try:
        settings = get_settings()
    except Exception as e:
        setup_logging()
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    setup_logging(
        settings.LOG_LEVEL,
        settings.LOG_DIR or None,
        max_bytes=settings.MAX_LOG_FILE_SIZE,
        backup_count=settings.BACKUP_COUNT,
    )
    logger.info("Starting server...")
    logger.info("Python version: %s", platform.python_version())
    logger.info("Working directory: %s", os.getcwd())

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
    except Exception:
        logger.exception("Server failed")
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
