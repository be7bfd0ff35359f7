# Notion MCP Gateway CLI
"""Command line entry point: serve the tools over stdio or HTTP."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import uvicorn
from mcp.server.stdio import stdio_server

from notion_mcp.config import settings
from notion_mcp.exceptions import ConfigurationError

logger = logging.getLogger("notion_mcp.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notion-mcp-gateway",
        description="Expose the Notion API as MCP tools",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve on (default: stdio)",
    )
    parser.add_argument("--host", default=None, help=f"HTTP host (default: {settings.host})")
    parser.add_argument("--port", type=int, default=None, help=f"HTTP port (default: {settings.port})")
    parser.add_argument(
        "--auth-token",
        default=None,
        help="Bearer token required by the HTTP transport",
    )
    parser.add_argument("--spec", default=None, help="Path to the OpenAPI document")
    return parser


async def run_stdio() -> None:
    """Serve on stdin/stdout until the client disconnects."""
    from notion_mcp.server import server
    from notion_mcp.services.tool_dispatcher import ToolDispatcher, set_dispatcher

    dispatcher = ToolDispatcher.from_settings(settings)
    set_dispatcher(dispatcher)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await dispatcher.close()
        set_dispatcher(None)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # stdout carries JSON-RPC on stdio
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.spec:
        settings.openapi_spec_path = args.spec
    if args.auth_token is not None:
        settings.auth_token = args.auth_token

    if args.transport == "http":
        host = args.host or settings.host
        port = args.port or settings.port
        logger.info(f"Starting HTTP transport on {host}:{port}")
        uvicorn.run("notion_mcp.main:app", host=host, port=port)
        return 0

    try:
        asyncio.run(run_stdio())
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
