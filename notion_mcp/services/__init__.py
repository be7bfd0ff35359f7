# Notion MCP Services
"""Service layer for the Notion MCP gateway."""

from .argument_reconciler import reconcile_arguments, widen_object_schemas
from .block_formatter import BlockFormatter
from .request_executor import RequestExecutor
from .response_formatter import ResponseFormatter, format_response
from .schema_converter import SchemaConverter
from .spec_loader import load_openapi_spec
from .tool_dispatcher import ToolDispatcher, get_dispatcher, set_dispatcher
from .tool_filter import ToolFilterConfig, should_include_operation

__all__ = [
    "reconcile_arguments",
    "widen_object_schemas",
    "BlockFormatter",
    "RequestExecutor",
    "ResponseFormatter",
    "format_response",
    "SchemaConverter",
    "load_openapi_spec",
    "ToolDispatcher",
    "get_dispatcher",
    "set_dispatcher",
    "ToolFilterConfig",
    "should_include_operation",
]
