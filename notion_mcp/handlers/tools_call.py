# MCP Tools Call Handler
"""Handles MCP tools/call request."""

import logging
from typing import Any, Dict, Optional

from notion_mcp.models.mcp import MCPToolsCallResponse
from notion_mcp.services.tool_dispatcher import get_dispatcher

logger = logging.getLogger("notion_mcp.handlers.tools_call")


async def handle_tools_call(
    name: str,
    arguments: Optional[Dict[str, Any]] = None,
) -> MCPToolsCallResponse:
    """
    Handle MCP tools/call request.

    Args:
        name: Published tool name
        arguments: Tool arguments as sent by the client

    Returns:
        MCP tool call response

    Raises:
        httpx.TransportError: the wrapped API could not be reached
    """
    logger.info(f"Calling tool: {name}")
    result = await get_dispatcher().call_tool(name, arguments or {})
    if result.isError:
        logger.info(f"Tool {name} returned an error result")
    return result
