# Notion MCP Handlers
"""MCP protocol handlers."""

from .tools_call import handle_tools_call
from .tools_list import handle_tools_list

__all__ = [
    "handle_tools_list",
    "handle_tools_call",
]
