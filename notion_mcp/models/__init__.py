# Gateway Models
"""Pydantic models for MCP protocol, OpenAPI catalog and Notion responses."""

from .mcp import (
    MCPErrorCode,
    MCPTextContent,
    MCPTool,
    MCPToolsCallResponse,
    MCPToolsListResponse,
)
from .notion import (
    NotionBlock,
    NotionDatabase,
    NotionList,
    NotionPage,
    NotionUser,
    OpaqueJSON,
    decode_response,
)
from .openapi import (
    CatalogEntry,
    ConversionResult,
    ExecutionResult,
    OperationDescriptor,
    ParameterDescriptor,
    ToolDefinition,
    ToolMethod,
)

__all__ = [
    # MCP models
    "MCPErrorCode",
    "MCPTool",
    "MCPTextContent",
    "MCPToolsCallResponse",
    "MCPToolsListResponse",
    # OpenAPI catalog models
    "CatalogEntry",
    "ConversionResult",
    "ExecutionResult",
    "OperationDescriptor",
    "ParameterDescriptor",
    "ToolDefinition",
    "ToolMethod",
    # Notion response variants
    "NotionBlock",
    "NotionDatabase",
    "NotionList",
    "NotionPage",
    "NotionUser",
    "OpaqueJSON",
    "decode_response",
]
