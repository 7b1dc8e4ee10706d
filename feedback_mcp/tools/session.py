"""ToolSession — collaborators and state shared across tool calls within a connection."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, AsyncIterator

from feedback_mcp.config import Settings

if TYPE_CHECKING:
    from feedback_mcp.native.base import NativeInteraction

logger = logging.getLogger(__name__)


class ToolSession:
    """Holds the native interaction subsystem and settings for one connected client.

    The dialog lock is the only state shared between calls; it guards the
    OS dialog surface when ``SERIALIZE_DIALOGS`` is enabled.
    """

    def __init__(self, native: NativeInteraction, settings: Settings | None = None) -> None:
        self.native = native
        self.settings = settings or Settings()
        self._dialog_lock = asyncio.Lock()

    @property
    def capture_dir(self) -> Path:
        return self.settings.capture_dir

    @property
    def dialog_title(self) -> str:
        return self.settings.APP_TITLE

    def resolve_path(self, path: str) -> str:
        return os.path.abspath(os.path.expanduser(path))

    @contextlib.asynccontextmanager
    async def dialog_turn(self) -> AsyncIterator[None]:
        if not self.settings.SERIALIZE_DIALOGS:
            yield
            return
        if self._dialog_lock.locked():
            logger.info("Waiting for an open dialog to finish")
        async with self._dialog_lock:
            yield
