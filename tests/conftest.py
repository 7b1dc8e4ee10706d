from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest
from PIL import Image

from feedback_mcp.config import Settings
from feedback_mcp.native.base import NativeInteraction
from feedback_mcp.tools.session import ToolSession
from feedback_mcp.tools.types import CaptureMode, InteractionOutcome


class FakeNativeInteraction(NativeInteraction):
    """Replays queued outcomes and records every call."""

    def __init__(self) -> None:
        self.text_outcomes: list[InteractionOutcome] = []
        self.choice_outcomes: list[InteractionOutcome] = []
        self.file_outcomes: list[InteractionOutcome] = []
        # (outcome, bytes written to the target path or None)
        self.capture_outcomes: list[tuple[InteractionOutcome, bytes | None]] = []
        self.calls: list[tuple[str, tuple]] = []
        self.alerts: list[tuple[str, str]] = []

    @staticmethod
    def _next(queue: list, method: str):
        if not queue:
            raise AssertionError(f"unexpected {method} call")
        return queue.pop(0)

    async def prompt_text(self, title: str, message: str, default: str = "") -> InteractionOutcome:
        self.calls.append(("prompt_text", (title, message, default)))
        return self._next(self.text_outcomes, "prompt_text")

    async def prompt_choice(
        self,
        message: str,
        choices: Sequence[str],
        default: str | None = None,
        cancellable: bool = True,
    ) -> InteractionOutcome:
        self.calls.append(("prompt_choice", (message, tuple(choices), default, cancellable)))
        return self._next(self.choice_outcomes, "prompt_choice")

    async def pick_file(self, prompt: str, type_identifiers: Sequence[str] = ()) -> InteractionOutcome:
        self.calls.append(("pick_file", (prompt, tuple(type_identifiers))))
        return self._next(self.file_outcomes, "pick_file")

    async def capture(self, mode: CaptureMode, path: Path) -> InteractionOutcome:
        self.calls.append(("capture", (mode, path)))
        outcome, payload = self._next(self.capture_outcomes, "capture")
        if payload is not None:
            path.write_bytes(payload)
        return outcome

    async def alert(self, title: str, message: str) -> None:
        self.alerts.append((title, message))

    def called(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]


@pytest.fixture
def fake_native() -> FakeNativeInteraction:
    return FakeNativeInteraction()


@pytest.fixture
def capture_dir(tmp_path: Path) -> Path:
    return tmp_path / "captures"


@pytest.fixture
def settings(capture_dir: Path) -> Settings:
    return Settings(CAPTURE_DIR=str(capture_dir), SERIALIZE_DIALOGS=True)


@pytest.fixture
def session(fake_native: FakeNativeInteraction, settings: Settings) -> ToolSession:
    return ToolSession(fake_native, settings)


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Write a solid-colour image with Pillow and return its path."""

    def _make(
        name: str = "sample.png",
        size: tuple[int, int] = (64, 48),
        fmt: str | None = None,
    ) -> Path:
        path = tmp_path / name
        img = Image.new("RGB", size, color=(59, 130, 246))
        img.save(path, format=fmt or "PNG")
        return path

    return _make


def png_bytes(size: tuple[int, int] = (32, 16)) -> bytes:
    import io

    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


def parse_report(text: str) -> tuple[str, dict]:
    import json

    header, _, body = text.partition("\n\n")
    return header, json.loads(body)
