# Gateway Exceptions
"""Exception hierarchy for the Notion MCP gateway."""

from typing import Any, Optional

import httpx


class GatewayError(Exception):
    """Base class for gateway errors."""


class ConfigurationError(GatewayError):
    """Fatal startup error: missing base URL, missing operationId, bad spec file."""


class InvalidArgumentError(GatewayError):
    """Arguments of one call cannot be mapped onto the HTTP request."""


class FileUploadError(InvalidArgumentError):
    """A file parameter could not be turned into an upload for this call."""


class APIResponseError(GatewayError):
    """
    The wrapped API answered with an HTTP error status.

    Carries the parsed remote body and the response headers so the caller
    can tell a missing object from a validation failure.
    """

    def __init__(
        self,
        message: str,
        status: int,
        data: Any = None,
        headers: Optional[httpx.Headers] = None,
    ):
        super().__init__(f"{status} {message}")
        self.status = status
        self.data = data
        self.headers = headers if headers is not None else httpx.Headers()
