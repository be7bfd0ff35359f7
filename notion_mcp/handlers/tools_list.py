# MCP Tools List Handler
"""Handles MCP tools/list request."""

import logging

from notion_mcp.models.mcp import MCPToolsListResponse
from notion_mcp.services.tool_dispatcher import get_dispatcher

logger = logging.getLogger("notion_mcp.handlers.tools_list")


async def handle_tools_list() -> MCPToolsListResponse:
    """
    Handle MCP tools/list request.

    Returns:
        Published tools with their widened input schemas
    """
    tools = get_dispatcher().list_tools()
    logger.debug(f"Listing {len(tools)} tools")
    return MCPToolsListResponse(tools=tools)
