# Authentication Middleware
"""Static bearer-token authentication for the HTTP transport."""

import hmac
import logging
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from notion_mcp.config import settings

logger = logging.getLogger("notion_mcp.middleware.auth")


def verify_bearer_token(authorization: Optional[str], expected: str) -> bool:
    """
    Check an Authorization header against the configured token.

    Args:
        authorization: Authorization header value (e.g., "Bearer xxx")
        expected: Configured token

    Returns:
        True if the header carries the expected bearer token
    """
    if not authorization:
        return False

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return False

    return hmac.compare_digest(parts[1].strip(), expected)


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware to verify bearer token authentication."""

    # Paths that don't require authentication
    PUBLIC_PATHS = {"/health", "/health/", "/"}

    async def dispatch(self, request: Request, call_next):
        """Check authentication for protected endpoints."""
        path = request.url.path

        if request.method == "OPTIONS":
            return await call_next(request)

        if path in self.PUBLIC_PATHS:
            return await call_next(request)

        # Dev mode: no token configured
        if not settings.auth_token:
            logger.debug("Dev mode: AUTH_TOKEN not set, skipping auth")
            return await call_next(request)

        if not verify_bearer_token(request.headers.get("Authorization"), settings.auth_token):
            logger.warning(f"Unauthorized request to {path}")
            return JSONResponse(
                status_code=401,
                content={"detail": "Invalid or missing bearer token"},
                headers={"WWW-Authenticate": "Bearer"},
            )

        return await call_next(request)
