from feedback_mcp.native.base import NativeInteraction
from feedback_mcp.native.macos import MacOSInteraction

__all__ = [
    "MacOSInteraction",
    "NativeInteraction",
]
