from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from feedback_mcp.native import macos
from feedback_mcp.native.macos import MacOSInteraction, escape_applescript, normalize_newlines
from feedback_mcp.tools.types import CaptureMode, OutcomeKind


class FakeProcess:
    def __init__(
        self,
        returncode: int = 0,
        stdout: bytes = b"",
        stderr: bytes = b"",
        delay: float = 0,
        exited: bool = False,
    ) -> None:
        self.returncode = returncode
        self._stdout = stdout
        self._stderr = stderr
        self._delay = delay
        self.killed = False
        self._exited = exited

    async def communicate(self) -> tuple[bytes, bytes]:
        if self._delay:
            await asyncio.sleep(self._delay)
        return self._stdout, self._stderr

    def kill(self) -> None:
        if self._exited:
            raise ProcessLookupError
        self.killed = True

    async def wait(self) -> int:
        return self.returncode


class Recorder:
    def __init__(self, process: FakeProcess | Exception) -> None:
        self.process = process
        self.argv: list[tuple[str, ...]] = []

    async def __call__(self, *argv: str, **kwargs: Any) -> FakeProcess:
        self.argv.append(argv)
        if isinstance(self.process, Exception):
            raise self.process
        return self.process

    @property
    def script(self) -> str:
        return self.argv[-1][2]


@pytest.fixture
def run_with(monkeypatch: pytest.MonkeyPatch):
    def _install(process: FakeProcess | Exception) -> Recorder:
        recorder = Recorder(process)
        monkeypatch.setattr(macos.asyncio, "create_subprocess_exec", recorder)
        return recorder

    return _install


def test_escape_applescript() -> None:
    assert escape_applescript('say "hi" \\ bye') == 'say \\"hi\\" \\\\ bye'


def test_normalize_newlines() -> None:
    assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc"


@pytest.mark.asyncio
async def test_prompt_text_value(run_with) -> None:
    recorder = run_with(FakeProcess(stdout=b"line one\r\nline two\r\n"))

    outcome = await MacOSInteraction().prompt_text("Feedback", 'Say "something"')

    assert outcome.kind is OutcomeKind.VALUE
    assert outcome.value == "line one\nline two"
    assert recorder.argv[0][:2] == ("osascript", "-e")
    assert 'display dialog "Say \\"something\\""' in recorder.script
    assert 'with title "Feedback"' in recorder.script


@pytest.mark.asyncio
async def test_user_cancel(run_with) -> None:
    run_with(FakeProcess(returncode=1, stderr=b"execution error: User canceled. (-128)"))

    outcome = await MacOSInteraction().prompt_text("t", "m")

    assert outcome.is_cancelled


@pytest.mark.asyncio
async def test_permission_error_is_failure_with_hint(run_with) -> None:
    run_with(FakeProcess(
        returncode=1,
        stderr=b"execution error: Not authorized to send Apple events to System Events. (-1743)",
    ))

    outcome = await MacOSInteraction().pick_file("Pick")

    assert outcome.is_failed
    assert "-1743" in outcome.reason
    assert "Privacy & Security" in outcome.reason


@pytest.mark.asyncio
async def test_osascript_missing(run_with) -> None:
    run_with(FileNotFoundError(2, "No such file or directory", "osascript"))

    outcome = await MacOSInteraction().prompt_text("t", "m")

    assert outcome.is_failed
    assert "osascript unavailable" in outcome.reason


@pytest.mark.asyncio
async def test_timeout_kills_dialog(run_with) -> None:
    process = FakeProcess(stdout=b"late", delay=1)
    run_with(process)

    outcome = await MacOSInteraction(timeout=0.01).prompt_text("t", "m")

    assert outcome.is_failed
    assert "timed out" in outcome.reason
    assert process.killed


@pytest.mark.asyncio
async def test_timeout_after_process_exited(run_with) -> None:
    run_with(FakeProcess(delay=1, exited=True))

    outcome = await MacOSInteraction(timeout=0.01).prompt_text("t", "m")

    assert outcome.is_failed
    assert "timed out" in outcome.reason


@pytest.mark.asyncio
async def test_cancelled_step_kills_dialog(run_with) -> None:
    process = FakeProcess(stdout=b"never", delay=30)
    run_with(process)

    task = asyncio.create_task(MacOSInteraction().run_applescript("display dialog \"x\""))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert process.killed


@pytest.mark.asyncio
async def test_prompt_choice_buttons(run_with) -> None:
    recorder = run_with(FakeProcess(stdout=b"Full Screen\n"))

    outcome = await MacOSInteraction().prompt_choice(
        "Please choose screenshot type:", ["Select Area", "Full Screen"], default="Select Area",
    )

    assert outcome.value == "Full Screen"
    assert 'buttons {"Cancel", "Select Area", "Full Screen"}' in recorder.script
    assert 'default button "Select Area"' in recorder.script
    assert 'cancel button "Cancel"' in recorder.script


@pytest.mark.asyncio
async def test_prompt_choice_not_cancellable(run_with) -> None:
    recorder = run_with(FakeProcess(stdout=b"Skip"))

    await MacOSInteraction().prompt_choice(
        "Would you like to add an image?", ["Skip", "Select Image", "Screenshot"], cancellable=False,
    )

    assert "cancel button" not in recorder.script
    assert 'buttons {"Skip", "Select Image", "Screenshot"}' in recorder.script


@pytest.mark.asyncio
async def test_cancel_label_is_cancellation(run_with) -> None:
    run_with(FakeProcess(stdout=b"Cancel"))

    outcome = await MacOSInteraction().prompt_choice("m", ["A", "B"])

    assert outcome.is_cancelled


@pytest.mark.asyncio
async def test_too_many_buttons() -> None:
    with pytest.raises(ValueError):
        await MacOSInteraction().prompt_choice("m", ["A", "B", "C"])


@pytest.mark.asyncio
async def test_pick_file(run_with) -> None:
    recorder = run_with(FakeProcess(stdout=b"/Users/me/Desktop/shot.png\n"))

    outcome = await MacOSInteraction().pick_file("Please select an image file", ["public.image"])

    assert outcome.value == "/Users/me/Desktop/shot.png"
    assert 'of type {"public.image"}' in recorder.script


@pytest.mark.asyncio
async def test_pick_file_empty_output_is_cancel(run_with) -> None:
    run_with(FakeProcess(stdout=b"\n"))

    outcome = await MacOSInteraction().pick_file("Pick")

    assert outcome.is_cancelled


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "mode, expected",
    [
        (CaptureMode.SELECT_AREA, ("screencapture", "-s")),
        (CaptureMode.FULL_SCREEN, ("screencapture",)),
    ],
)
async def test_capture_command(run_with, tmp_path: Path, mode: CaptureMode, expected: tuple[str, ...]) -> None:
    recorder = run_with(FakeProcess())
    target = tmp_path / "shot.png"

    outcome = await MacOSInteraction().capture(mode, target)

    assert outcome.value == str(target)
    assert recorder.argv[0] == (*expected, str(target))


@pytest.mark.asyncio
async def test_capture_failure(run_with, tmp_path: Path) -> None:
    run_with(FakeProcess(returncode=1, stderr=b"could not create image from display"))

    outcome = await MacOSInteraction().capture(CaptureMode.FULL_SCREEN, tmp_path / "x.png")

    assert outcome.is_failed
    assert "could not create image" in outcome.reason


@pytest.mark.asyncio
async def test_alert_never_raises(run_with) -> None:
    run_with(FakeProcess(returncode=1, stderr=b"boom"))

    assert await MacOSInteraction().alert("Screenshot Failed", "reason") is None
