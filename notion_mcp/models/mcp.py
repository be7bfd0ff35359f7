# MCP Protocol Models
"""Pydantic models for MCP (Model Context Protocol) messages."""

from enum import Enum
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


class MCPErrorCode(str, Enum):
    """MCP error codes."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    REMOTE_ERROR = "REMOTE_ERROR"


class MCPTool(BaseModel):
    """MCP tool definition as published on tools/list."""

    name: str = Field(..., description="Tool name")
    description: str = Field(default="", description="Tool description")
    inputSchema: Dict[str, Any] = Field(..., description="JSON Schema for tool input")


class MCPTextContent(BaseModel):
    """MCP text content block."""

    type: Literal["text"] = "text"
    text: str = Field(..., description="Text content")


class MCPToolsListResponse(BaseModel):
    """MCP tools/list response."""

    tools: List[MCPTool] = Field(..., description="Available tools")


class MCPToolsCallResponse(BaseModel):
    """MCP tools/call response."""

    content: List[MCPTextContent] = Field(..., description="Result content")
    isError: bool = Field(default=False, description="Error flag")
