from feedback_mcp.tools.types import ImagePart, InteractionOutcome, TextPart, ToolDescriptor, ToolResult
from feedback_mcp.tools.errors import ErrorCode, ToolError, UnknownToolError
from feedback_mcp.tools.dispatcher import dispatch, TOOL_HANDLERS, TOOL_NAMES
from feedback_mcp.tools.session import ToolSession
from feedback_mcp.tools.tool_schemas import list_tools

__all__ = [
    "ErrorCode",
    "ImagePart",
    "InteractionOutcome",
    "TextPart",
    "ToolDescriptor",
    "ToolError",
    "ToolResult",
    "ToolSession",
    "UnknownToolError",
    "dispatch",
    "list_tools",
    "TOOL_HANDLERS",
    "TOOL_NAMES",
]
