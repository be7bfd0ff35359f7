# Notion MCP Gateway Main Entry Point
"""FastAPI application with MCP SDK Streamable HTTP transport."""

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.routing import Route

from notion_mcp.config import settings
from notion_mcp.exceptions import ConfigurationError
from notion_mcp.handlers import handle_tools_call, handle_tools_list
from notion_mcp.middleware.auth import AuthMiddleware
from notion_mcp.server import create_session_manager
from notion_mcp.services.tool_dispatcher import ToolDispatcher, get_dispatcher, set_dispatcher

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("notion_mcp.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting Notion MCP Gateway v{settings.mcp_server_version}")

    try:
        dispatcher = ToolDispatcher.from_settings(settings)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise
    set_dispatcher(dispatcher)

    session_manager = create_session_manager()
    app.state.session_manager = session_manager
    async with session_manager.run():
        yield

    logger.info("Shutting down Notion MCP Gateway")
    await dispatcher.close()
    set_dispatcher(None)


app = FastAPI(
    title="Notion MCP Gateway",
    description="MCP tools for the Notion API, generated from its OpenAPI document",
    version=settings.mcp_server_version,
    lifespan=lifespan,
    openapi_url=None,
    docs_url=None,
    redoc_url=None,
)

# Add middleware (order matters - first added = outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AuthMiddleware)


# =============================================================================
# MCP SDK Streamable HTTP Transport at /mcp
# =============================================================================


class MCPTransport:
    """
    ASGI app delegating to the session manager created in the lifespan.

    Starlette's Route treats class instances (non-function callables) as
    raw ASGI apps, passing (scope, receive, send) directly.
    """

    async def __call__(self, scope, receive, send):
        session_manager = scope["app"].state.session_manager
        await session_manager.handle_request(scope, receive, send)


app.router.routes.insert(0, Route("/mcp", MCPTransport(), methods=["GET", "POST", "DELETE"]))


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.mcp_server_name,
        "version": settings.mcp_server_version,
        "tools": len(get_dispatcher().catalog),
    }


@app.get("/")
async def root():
    """Root endpoint with service info."""
    return {
        "service": settings.mcp_server_name,
        "version": settings.mcp_server_version,
        "endpoints": {
            "health": "/health",
            "mcp": "/mcp",
            "rest": "/rest/tools",
        },
    }


# =============================================================================
# REST Convenience Endpoints
# =============================================================================


@app.get("/rest/tools")
async def list_tools():
    """List available MCP tools (REST endpoint for testing)."""
    result = await handle_tools_list()
    return result.model_dump()


@app.post("/rest/tools/{name}/call")
async def call_tool(name: str, request: Request):
    """Execute an MCP tool (REST endpoint for testing)."""
    try:
        body = await request.json()
    except json.JSONDecodeError:
        body = {}

    arguments = body.get("arguments", {}) if isinstance(body, dict) else {}
    result = await handle_tools_call(name=name, arguments=arguments)
    return result.model_dump()
