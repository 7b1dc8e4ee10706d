"""macOS implementation of the native interaction subsystem — osascript dialogs and screencapture."""

from __future__ import annotations

import asyncio
import logging
import platform
from pathlib import Path
from typing import Sequence

from feedback_mcp.native.base import NativeInteraction
from feedback_mcp.tools.types import CaptureMode, InteractionOutcome

logger = logging.getLogger(__name__)

IS_MACOS = platform.system() == "Darwin"

MAX_DIALOG_BUTTONS = 3
CANCEL_BUTTON = "Cancel"

_PERMISSION_HINT = (
    "macOS permission required.\n"
    "Go to: System Settings → Privacy & Security → Automation / Accessibility / Screen Recording\n"
    "and enable the application that launched this server."
)


def escape_applescript(text: str) -> str:
    """Escape a Python string for use inside an AppleScript string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def _is_user_cancel(stderr: str) -> bool:
    # -128 = userCanceledErr
    return "-128" in stderr or "user canceled" in stderr.lower()


def _describe_error(stderr: str, returncode: int | None) -> str:
    text = stderr.strip()
    # -1743 = not authorised to send Apple Events
    # -25211 = AXUIElement access denied
    if "-1743" in text or "-25211" in text or "not authorized" in text.lower() or "assistive" in text.lower():
        return f"{text}\n{_PERMISSION_HINT}" if text else _PERMISSION_HINT
    return text or f"exit status {returncode}"


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        pass
    await proc.wait()


def _string_list(items: Sequence[str]) -> str:
    return "{" + ", ".join(f'"{escape_applescript(i)}"' for i in items) + "}"


class MacOSInteraction(NativeInteraction):
    """Drives AppleScript dialogs through ``osascript`` and captures with ``screencapture``.

    Every step is an asyncio subprocess, so only the calling task waits on the
    user; the event loop stays free for the transport and signal handling.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout
        if not IS_MACOS:
            logger.warning("Native dialogs require macOS; running on %s", platform.system())

    async def _exec(self, *argv: str) -> tuple[int | None, str, str] | InteractionOutcome:
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return InteractionOutcome.failed(f"{argv[0]} unavailable: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            await _terminate(proc)
            return InteractionOutcome.failed(f"{argv[0]} timed out after {self.timeout}s")
        except asyncio.CancelledError:
            # Leaves no dialog on screen once the call is abandoned.
            await _terminate(proc)
            raise

        return (
            proc.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def run_applescript(self, script: str) -> InteractionOutcome:
        result = await self._exec("osascript", "-e", script)
        if isinstance(result, InteractionOutcome):
            return result

        returncode, stdout, stderr = result
        if returncode == 0:
            return InteractionOutcome.of(normalize_newlines(stdout))
        if _is_user_cancel(stderr):
            return InteractionOutcome.cancelled()
        return InteractionOutcome.failed(f"AppleScript error: {_describe_error(stderr, returncode)}")

    async def prompt_text(self, title: str, message: str, default: str = "") -> InteractionOutcome:
        script = f"""
tell application "System Events"
    activate
    set userInput to text returned of (display dialog "{escape_applescript(message)}" default answer "{escape_applescript(default)}" with title "{escape_applescript(title)}" buttons {{"{CANCEL_BUTTON}", "OK"}} default button "OK" cancel button "{CANCEL_BUTTON}")
    return userInput
end tell
"""
        return await self.run_applescript(script)

    async def prompt_choice(
        self,
        message: str,
        choices: Sequence[str],
        default: str | None = None,
        cancellable: bool = True,
    ) -> InteractionOutcome:
        buttons = [CANCEL_BUTTON, *choices] if cancellable else list(choices)
        if len(buttons) > MAX_DIALOG_BUTTONS:
            raise ValueError(f"display dialog supports at most {MAX_DIALOG_BUTTONS} buttons, got {len(buttons)}")

        clauses = f"buttons {_string_list(buttons)}"
        if default:
            clauses += f' default button "{escape_applescript(default)}"'
        if cancellable:
            clauses += f' cancel button "{CANCEL_BUTTON}"'

        script = f"""
tell application "System Events"
    activate
    set userChoice to button returned of (display dialog "{escape_applescript(message)}" {clauses})
    return userChoice
end tell
"""
        outcome = await self.run_applescript(script)
        if outcome.is_value and outcome.value == CANCEL_BUTTON:
            return InteractionOutcome.cancelled()
        return outcome

    async def pick_file(self, prompt: str, type_identifiers: Sequence[str] = ()) -> InteractionOutcome:
        of_type = f" of type {_string_list(type_identifiers)}" if type_identifiers else ""
        script = f"""
tell application "System Events"
    activate
    set selectedFile to (choose file with prompt "{escape_applescript(prompt)}"{of_type})
    return POSIX path of selectedFile
end tell
"""
        outcome = await self.run_applescript(script)
        if outcome.is_value and not outcome.value:
            return InteractionOutcome.cancelled()
        return outcome

    async def capture(self, mode: CaptureMode, path: Path) -> InteractionOutcome:
        argv = ["screencapture"]
        if mode is CaptureMode.SELECT_AREA:
            argv.append("-s")
        argv.append(str(path))

        logger.info("Taking screenshot: %s", " ".join(argv))
        result = await self._exec(*argv)
        if isinstance(result, InteractionOutcome):
            return result

        returncode, _, stderr = result
        if returncode != 0:
            return InteractionOutcome.failed(f"Screenshot failed: {_describe_error(stderr, returncode)}")
        return InteractionOutcome.of(str(path))

    async def alert(self, title: str, message: str) -> None:
        script = f"""
tell application "System Events"
    activate
    display alert "{escape_applescript(title)}" message "{escape_applescript(message)}" buttons {{"OK"}} default button "OK"
end tell
"""
        outcome = await self.run_applescript(script)
        if outcome.is_failed:
            logger.debug("Alert could not be shown: %s", outcome.reason)
