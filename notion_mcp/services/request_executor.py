# Request Executor Service
"""HTTP client executing OpenAPI operations against the wrapped API."""

import json
import logging
import os
from contextlib import ExitStack
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from notion_mcp.config import settings
from notion_mcp.exceptions import APIResponseError, FileUploadError, InvalidArgumentError
from notion_mcp.models.openapi import ExecutionResult, OperationDescriptor

logger = logging.getLogger("notion_mcp.services.request_executor")


class PartitionedArguments:
    """Arguments of one call split by where they travel in the HTTP request."""

    def __init__(self):
        self.path: Dict[str, Any] = {}
        self.query: Dict[str, Any] = {}
        self.headers: Dict[str, str] = {}
        self.body: Dict[str, Any] = {}


class RequestExecutor:
    """HTTP client for the wrapped API."""

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url
        self.headers = dict(headers or {})
        self.timeout = timeout or settings.request_timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"User-Agent": settings.user_agent, **self.headers},
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    @staticmethod
    def partition_arguments(
        operation: OperationDescriptor,
        arguments: Dict[str, Any],
    ) -> PartitionedArguments:
        """
        Split arguments into path, query, header and body groups.

        Declared path/query/header parameters go to their location; the rest
        form the body. Without a declared request body, the rest become query
        parameters instead.
        """
        locations = {p.name: p.location for p in operation.parameters}
        parts = PartitionedArguments()

        for name, value in arguments.items():
            location = locations.get(name)
            if location == "path":
                parts.path[name] = value
            elif location == "query":
                parts.query[name] = value
            elif location == "header":
                if value is not None:
                    parts.headers[name] = _header_value(value)
            elif location == "cookie":
                continue
            elif operation.has_request_body:
                parts.body[name] = value
            else:
                parts.query[name] = value

        return parts

    @staticmethod
    def build_path(template: str, path_params: Dict[str, Any]) -> str:
        """Substitute ``{name}`` placeholders with URL-escaped values."""
        path = template
        for name, value in path_params.items():
            path = path.replace(f"{{{name}}}", quote(str(value), safe=""))
        if "{" in path:
            raise InvalidArgumentError(f"Missing path parameter for {template}")
        return path

    @staticmethod
    def build_query(query: Dict[str, Any]) -> List[Tuple[str, Any]]:
        params: List[Tuple[str, Any]] = []
        for name, value in query.items():
            if value is None:
                continue
            values = value if isinstance(value, list) else [value]
            for item in values:
                if isinstance(item, (dict, list)):
                    item = json.dumps(item)
                params.append((name, item))
        return params

    @staticmethod
    def _check_file_arguments(
        operation: OperationDescriptor,
        body: Dict[str, Any],
    ) -> Dict[str, List[str]]:
        """File paths per file parameter; raises before anything is opened."""
        paths: Dict[str, List[str]] = {}
        for name in operation.file_parameters:
            value = body.get(name)
            if not value:
                raise FileUploadError(f"File path must be provided for parameter: {name}")
            if isinstance(value, str):
                candidates = [value]
            elif isinstance(value, list) and all(isinstance(v, str) for v in value):
                candidates = list(value)
            else:
                raise FileUploadError(
                    f"Unsupported file type for {name}: {type(value).__name__}"
                )
            for candidate in candidates:
                if not os.path.isfile(candidate) or not os.access(candidate, os.R_OK):
                    raise FileUploadError(f"Cannot read file for {name}: {candidate}")
            paths[name] = candidates
        return paths

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(
        self,
        operation: OperationDescriptor,
        arguments: Dict[str, Any],
    ) -> ExecutionResult:
        """
        Execute one operation.

        Args:
            operation: Operation to call
            arguments: Reconciled arguments

        Returns:
            Response data, status and headers

        Raises:
            APIResponseError: remote answered with status >= 400
            FileUploadError: a file argument is not a readable path
            httpx.TransportError: no response was received
        """
        parts = self.partition_arguments(operation, arguments)
        path = self.build_path(operation.path, parts.path)
        params = self.build_query(parts.query)
        file_paths = self._check_file_arguments(operation, parts.body)

        client = await self._get_client()

        with ExitStack() as stack:
            request_kwargs: Dict[str, Any] = {"params": params, "headers": dict(parts.headers)}

            if file_paths:
                files = []
                for name, candidates in file_paths.items():
                    for candidate in candidates:
                        handle = stack.enter_context(open(candidate, "rb"))
                        files.append((name, (os.path.basename(candidate), handle)))
                request_kwargs["files"] = files
                request_kwargs["data"] = {
                    name: value if isinstance(value, str) else json.dumps(value)
                    for name, value in parts.body.items()
                    if name not in file_paths
                }
            elif parts.body:
                request_kwargs["content"] = json.dumps(parts.body).encode("utf-8")
                request_kwargs["headers"]["Content-Type"] = "application/json"

            logger.debug(f"{operation.method} {path} ({operation.operation_id})")
            try:
                response = await client.request(operation.method, path, **request_kwargs)
            except httpx.TransportError as e:
                logger.error(f"Transport error calling {operation.operation_id}: {e}")
                raise

        data = _response_data(response)
        if response.status_code >= 400:
            logger.warning(
                f"{operation.operation_id} failed with HTTP {response.status_code}"
            )
            raise APIResponseError(
                response.reason_phrase or "HTTP error",
                status=response.status_code,
                data=data,
                headers=response.headers,
            )

        return ExecutionResult(data=data, status=response.status_code, headers=response.headers)


def _header_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _response_data(response: httpx.Response) -> Any:
    """Parsed JSON body, raw text when not JSON, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
