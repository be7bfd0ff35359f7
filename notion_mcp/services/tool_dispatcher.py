# Tool Dispatcher Service
"""
Owns the published tool catalog and runs tool calls end to end.

A call goes through argument reconciliation, request execution and response
formatting. Remote HTTP errors and per-call argument problems come back as
error results; transport failures propagate to the caller.
"""

import hashlib
import json
import logging
from typing import Any, Dict, List, Optional

from notion_mcp.config import Settings
from notion_mcp.exceptions import APIResponseError, InvalidArgumentError
from notion_mcp.models.mcp import (
    MCPErrorCode,
    MCPTextContent,
    MCPTool,
    MCPToolsCallResponse,
)
from notion_mcp.models.openapi import CatalogEntry, ConversionResult
from notion_mcp.services.argument_reconciler import reconcile_arguments, widen_object_schemas
from notion_mcp.services.request_executor import RequestExecutor
from notion_mcp.services.response_formatter import ResponseFormatter
from notion_mcp.services.schema_converter import SchemaConverter
from notion_mcp.services.spec_loader import load_openapi_spec
from notion_mcp.services.tool_filter import ToolFilterConfig

logger = logging.getLogger("notion_mcp.services.tool_dispatcher")

TOOL_NAME_MAX_LENGTH = 64
_HASH_LENGTH = 8


def publish_name(full_name: str, taken: Dict[str, Any], max_length: int = TOOL_NAME_MAX_LENGTH) -> str:
    """
    External name for ``full_name``.

    Names are cut to ``max_length``. If the cut name is already taken, the
    later tool gets a prefix plus ``-`` and a short hash of its full name.
    """
    name = full_name[:max_length]
    if name not in taken:
        return name
    digest = hashlib.sha1(full_name.encode("utf-8")).hexdigest()[:_HASH_LENGTH]
    return f"{full_name[:max_length - _HASH_LENGTH - 1]}-{digest}"


def build_catalog(
    conversion: ConversionResult,
    max_length: int = TOOL_NAME_MAX_LENGTH,
) -> Dict[str, CatalogEntry]:
    """Publish every converted method under its external tool name."""
    catalog: Dict[str, CatalogEntry] = {}
    for api_name, definition in conversion.tools.items():
        for method in definition.methods:
            full_name = f"{api_name}-{method.name}"
            name = publish_name(full_name, catalog, max_length)
            if name != full_name[:max_length]:
                logger.warning(
                    f"Tool name {full_name[:max_length]} already published; "
                    f"publishing {full_name} as {name}"
                )
            catalog[name] = CatalogEntry(
                name=name,
                full_name=full_name,
                method=method,
                operation=conversion.openapi_lookup[method.name],
            )
    return catalog


def _error_response(code: MCPErrorCode, message: str) -> MCPToolsCallResponse:
    """Create error response."""
    logger.debug(f"Tool call error {code.value}: {message}")
    return MCPToolsCallResponse(
        content=[MCPTextContent(type="text", text=f"Error: {message}")],
        isError=True,
    )


def _remote_error_response(error: APIResponseError) -> MCPToolsCallResponse:
    """Structured ``{"status": "error", ...}`` payload for a remote HTTP error."""
    logger.debug(f"Tool call error {MCPErrorCode.REMOTE_ERROR.value}: HTTP {error.status}")
    body = error.data if isinstance(error.data, dict) else {"data": error.data}
    payload = {"status": "error", **body}
    return MCPToolsCallResponse(
        content=[MCPTextContent(type="text", text=json.dumps(payload))],
        isError=True,
    )


class ToolDispatcher:
    """Tool catalog plus the reconcile → execute → format pipeline."""

    def __init__(
        self,
        conversion: ConversionResult,
        executor: RequestExecutor,
        max_name_length: int = TOOL_NAME_MAX_LENGTH,
        format_responses: bool = True,
    ):
        self.executor = executor
        self.format_responses = format_responses
        self.catalog = build_catalog(conversion, max_name_length)
        self._published = [
            MCPTool(
                name=entry.name,
                description=entry.method.description,
                inputSchema=widen_object_schemas(entry.method.input_schema),
            )
            for entry in self.catalog.values()
        ]
        logger.info(f"Published {len(self.catalog)} tools")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ToolDispatcher":
        """
        Load the OpenAPI document and build a dispatcher.

        Raises:
            ConfigurationError: spec missing or invalid
        """
        spec = load_openapi_spec(settings.openapi_spec_path)
        conversion = SchemaConverter(
            spec,
            api_name=settings.api_name,
            base_url=settings.base_url,
            tool_filter=ToolFilterConfig(
                include=settings.tool_include,
                exclude=settings.tool_exclude,
                resource_types=settings.tool_resource_types,
            ),
        ).convert()
        executor = RequestExecutor(
            conversion.base_url,
            headers=settings.resolve_api_headers(),
            timeout=settings.request_timeout,
        )
        return cls(
            conversion,
            executor,
            max_name_length=settings.tool_name_max_length,
            format_responses=settings.format_responses,
        )

    def list_tools(self) -> List[MCPTool]:
        """Published tools with widened input schemas."""
        return list(self._published)

    def get_entry(self, name: str) -> Optional[CatalogEntry]:
        return self.catalog.get(name)

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> MCPToolsCallResponse:
        """
        Execute one tool call.

        Args:
            name: Published tool name
            arguments: Caller arguments, possibly loosely typed

        Returns:
            Formatted result, or an error result for unknown tools,
            unusable arguments and remote HTTP errors
        """
        entry = self.get_entry(name)
        if entry is None:
            logger.warning(f"Unknown tool: {name}")
            return _error_response(MCPErrorCode.TOOL_NOT_FOUND, f"Tool '{name}' not found")

        reconciled = reconcile_arguments(arguments, entry.method.input_schema)

        try:
            result = await self.executor.execute(entry.operation, reconciled)
        except APIResponseError as e:
            logger.info(f"Tool {name} returned HTTP {e.status}")
            return _remote_error_response(e)
        except InvalidArgumentError as e:
            return _error_response(MCPErrorCode.INVALID_ARGUMENT, str(e))

        if self.format_responses:
            text = ResponseFormatter().format_response(entry.operation.operation_id, result.data)
        else:
            text = json.dumps(result.data)
        return MCPToolsCallResponse(content=[MCPTextContent(type="text", text=text)])

    async def close(self):
        await self.executor.close()


# Process-wide dispatcher, set during startup
_dispatcher: Optional[ToolDispatcher] = None


def get_dispatcher() -> ToolDispatcher:
    if _dispatcher is None:
        raise RuntimeError("Tool dispatcher has not been initialized")
    return _dispatcher


def set_dispatcher(dispatcher: Optional[ToolDispatcher]) -> None:
    global _dispatcher
    _dispatcher = dispatcher
