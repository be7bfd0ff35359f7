# Notion MCP Gateway
"""Expose the Notion API, described by its OpenAPI document, as MCP tools."""

__version__ = "1.0.0"
