# MCP SDK Server
"""MCP Server using the official SDK, shared by the stdio and HTTP transports."""

import logging

import mcp.types as types
from mcp.server import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

from notion_mcp.config import settings
from notion_mcp.handlers import handle_tools_call, handle_tools_list

logger = logging.getLogger("notion_mcp.server")

server = Server(settings.mcp_server_name, version=settings.mcp_server_version)


def create_session_manager() -> StreamableHTTPSessionManager:
    """Session manager for the Streamable HTTP transport (one per app run)."""
    return StreamableHTTPSessionManager(
        app=server,
        json_response=True,
        stateless=True,
    )


@server.list_tools()
async def sdk_list_tools() -> list[types.Tool]:
    """List available tools via SDK transport."""
    result = await handle_tools_list()
    return [
        types.Tool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.inputSchema,
        )
        for tool in result.tools
    ]


@server.call_tool(validate_input=False)
async def sdk_call_tool(name: str, arguments: dict) -> list[types.TextContent]:
    """
    Execute a tool via SDK transport.

    Input validation is left to the argument reconciler, which accepts
    stringified values the advertised schema would reject.
    """
    result = await handle_tools_call(name=name, arguments=arguments or {})
    return [
        types.TextContent(type="text", text=block.text)
        for block in result.content
    ]
