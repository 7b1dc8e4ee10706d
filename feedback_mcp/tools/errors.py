from __future__ import annotations

import enum


class ErrorCode(str, enum.Enum):
    USER_CANCELLED = "user_cancelled"
    UNSUPPORTED_FORMAT = "unsupported_format"
    FILE_NOT_FOUND = "file_not_found"
    MISSING_ARGUMENT = "missing_argument"
    CAPTURE_FAILED = "capture_cancelled_or_failed"
    SUBSYSTEM_FAILURE = "subsystem_failure"
    UNREADABLE = "unreadable"
    UNKNOWN_TOOL = "unknown_tool"
    INTERNAL_ERROR = "internal_error"


CANCELLED_MESSAGE = "operation cancelled by user"


class HandlerError(Exception):
    """Failure raised inside a tool handler; converted to ToolError by the dispatcher."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR


class UserCancelledError(HandlerError):
    code = ErrorCode.USER_CANCELLED

    def __init__(self, detail: str | None = None) -> None:
        message = CANCELLED_MESSAGE if not detail else f"{CANCELLED_MESSAGE} ({detail})"
        super().__init__(message)
        self.detail = detail


class UnsupportedFormatError(HandlerError):
    code = ErrorCode.UNSUPPORTED_FORMAT

    def __init__(self, extension: str) -> None:
        super().__init__(f"Unsupported image format: {extension or '(none)'}")
        self.extension = extension


class ImageNotFoundError(HandlerError):
    code = ErrorCode.FILE_NOT_FOUND

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class MissingArgumentError(HandlerError):
    code = ErrorCode.MISSING_ARGUMENT

    def __init__(self, argument: str) -> None:
        super().__init__(f"{argument} parameter is required")
        self.argument = argument


class CaptureFailedError(HandlerError):
    code = ErrorCode.CAPTURE_FAILED


class SubsystemError(HandlerError):
    code = ErrorCode.SUBSYSTEM_FAILURE


class UnreadableImageError(HandlerError):
    code = ErrorCode.UNREADABLE


class ToolError(Exception):
    """The single error type that leaves the dispatcher for a failed tool call."""

    def __init__(
        self,
        tool_name: str,
        message: str,
        *,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    ) -> None:
        super().__init__(f"Tool {tool_name} failed: {message}")
        self.tool_name = tool_name
        self.message = message
        self.code = code

    @property
    def cancelled(self) -> bool:
        return self.code is ErrorCode.USER_CANCELLED


class UnknownToolError(ToolError):
    def __init__(self, tool_name: str, available: list[str]) -> None:
        super().__init__(
            tool_name,
            f"Unknown tool: {tool_name}. Available: {', '.join(available)}",
            code=ErrorCode.UNKNOWN_TOOL,
        )
