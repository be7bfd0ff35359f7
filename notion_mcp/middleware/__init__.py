# Notion MCP Middleware
"""Request middleware for authentication."""

from .auth import AuthMiddleware, verify_bearer_token

__all__ = [
    "AuthMiddleware",
    "verify_bearer_token",
]
