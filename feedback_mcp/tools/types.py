"""Shared types for the tool system — content parts, results, outcomes and descriptors."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["image"] = "image"
    data: str = Field(description="Raw base64-encoded image bytes")
    mime_type: str = Field(alias="mimeType", description="MIME type, e.g. 'image/png'")


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]


class ToolResult(BaseModel):
    """Ordered content parts produced by one successful tool call."""

    content: list[ContentPart] = Field(default_factory=list)

    @property
    def text_parts(self) -> list[TextPart]:
        return [p for p in self.content if isinstance(p, TextPart)]

    @property
    def image_parts(self) -> list[ImagePart]:
        return [p for p in self.content if isinstance(p, ImagePart)]

    def to_wire(self) -> list[dict[str, Any]]:
        return [p.model_dump(by_alias=True) for p in self.content]

    @classmethod
    def report(
        cls,
        header: str,
        details: dict[str, Any],
        image: ImagePart | None = None,
    ) -> ToolResult:
        """A text part holding ``header`` and the details as indented JSON, then the optional image."""
        text = f"{header}:\n\n{json.dumps(details, indent=2, ensure_ascii=False)}"
        parts: list[TextPart | ImagePart] = [TextPart(text=text)]
        if image is not None:
            parts.append(image)
        return cls(content=parts)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ToolDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class ImageMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    size_bytes: int
    format: str
    mime_type: str
    modified: datetime

    @property
    def size_kb(self) -> str:
        return f"{self.size_bytes / 1024:.2f}"


class OutcomeKind(str, enum.Enum):
    VALUE = "value"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class InteractionOutcome:
    """Result of a single native UI step: a value, a cancellation, or a failure."""

    kind: OutcomeKind
    value: str | None = None
    reason: str | None = None

    @classmethod
    def of(cls, value: str) -> InteractionOutcome:
        return cls(OutcomeKind.VALUE, value=value)

    @classmethod
    def cancelled(cls) -> InteractionOutcome:
        return cls(OutcomeKind.CANCELLED)

    @classmethod
    def failed(cls, reason: str) -> InteractionOutcome:
        return cls(OutcomeKind.FAILED, reason=reason)

    @property
    def is_value(self) -> bool:
        return self.kind is OutcomeKind.VALUE

    @property
    def is_cancelled(self) -> bool:
        return self.kind is OutcomeKind.CANCELLED

    @property
    def is_failed(self) -> bool:
        return self.kind is OutcomeKind.FAILED


class CaptureMode(str, enum.Enum):
    SELECT_AREA = "Select Area"
    FULL_SCREEN = "Full Screen"


class ImageChoice(str, enum.Enum):
    SKIP = "Skip"
    SELECT_IMAGE = "Select Image"
    SCREENSHOT = "Screenshot"
