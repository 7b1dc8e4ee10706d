"""Interface to the host's native dialog, file picker and screen capture facilities."""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Sequence

from feedback_mcp.tools.types import CaptureMode, InteractionOutcome


class NativeInteraction(abc.ABC):
    """Each step blocks the calling task until the user responds and resolves to
    an InteractionOutcome. Implementations never raise for cancellation or OS
    failures; those are returned as ``cancelled()`` / ``failed(reason)``.
    """

    @abc.abstractmethod
    async def prompt_text(self, title: str, message: str, default: str = "") -> InteractionOutcome:
        """Modal multi-line text entry. Value is the entered text."""

    @abc.abstractmethod
    async def prompt_choice(
        self,
        message: str,
        choices: Sequence[str],
        default: str | None = None,
        cancellable: bool = True,
    ) -> InteractionOutcome:
        """Modal button choice. Value is the label of the pressed button."""

    @abc.abstractmethod
    async def pick_file(self, prompt: str, type_identifiers: Sequence[str] = ()) -> InteractionOutcome:
        """Native file picker. Value is the POSIX path of the chosen file."""

    @abc.abstractmethod
    async def capture(self, mode: CaptureMode, path: Path) -> InteractionOutcome:
        """Capture the screen into ``path``.

        A value outcome only means the capture facility exited normally; the
        user may have aborted an area selection without a file being written.
        """

    @abc.abstractmethod
    async def alert(self, title: str, message: str) -> None:
        """Best-effort informational alert. Never raises."""
