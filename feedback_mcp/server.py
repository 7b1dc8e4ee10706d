"""MCP binding for the tool dispatcher — list_tools / call_tool over stdio."""

from __future__ import annotations

import logging
import os
from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from feedback_mcp.config import Settings
from feedback_mcp.tools.dispatcher import dispatch
from feedback_mcp.tools.session import ToolSession
from feedback_mcp.tools.tool_schemas import list_tools
from feedback_mcp.tools.types import TextPart, ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)

McpContent = types.TextContent | types.ImageContent


def to_mcp_tool(descriptor: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema,
    )


def to_mcp_content(result: ToolResult) -> list[McpContent]:
    blocks: list[McpContent] = []
    for part in result.content:
        if isinstance(part, TextPart):
            blocks.append(types.TextContent(type="text", text=part.text))
        else:
            blocks.append(types.ImageContent(type="image", data=part.data, mimeType=part.mime_type))
    return blocks


async def handle_list_tools() -> list[types.Tool]:
    logger.debug("Listing tools")
    return [to_mcp_tool(d) for d in list_tools()]


async def handle_call_tool(
    session: ToolSession,
    name: str,
    arguments: dict[str, Any] | None,
) -> list[McpContent]:
    """Dispatch a call. ToolError propagates; the SDK reports it as an ``isError`` result."""
    result = await dispatch(name, arguments, session)
    return to_mcp_content(result)


def build_server(session: ToolSession, settings: Settings) -> Server:
    server = Server(settings.SERVER_NAME, version=settings.SERVER_VERSION)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return await handle_list_tools()

    # Required arguments are checked by the dispatcher so a missing one
    # surfaces as a missing_argument tool error rather than a schema error.
    @server.call_tool(validate_input=False)
    async def _call_tool(name: str, arguments: dict[str, Any]) -> list[McpContent]:
        return await handle_call_tool(session, name, arguments)

    return server


async def serve(session: ToolSession, settings: Settings) -> None:
    """Serve until the client closes stdin."""
    server = build_server(session, settings)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Server connected successfully. PID: %d", os.getpid())
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
    logger.info("Client disconnected")
