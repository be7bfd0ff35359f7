# Test Configuration
"""Pytest fixtures for Notion MCP gateway tests."""

import copy

import httpx
import pytest
from fastapi.testclient import TestClient

from notion_mcp.config import settings
from notion_mcp.main import app
from notion_mcp.services.request_executor import RequestExecutor
from notion_mcp.services.schema_converter import SchemaConverter
from notion_mcp.services.tool_dispatcher import ToolDispatcher, set_dispatcher

# Ensure auth is enforced during tests (non-empty = auth required)
_TEST_AUTH_TOKEN = "test-auth-token"
settings.auth_token = _TEST_AUTH_TOKEN

BASE_URL = "https://api.notion.com"

_NOTION_SPEC = {
    "openapi": "3.1.0",
    "info": {"title": "Notion API", "version": "1"},
    "servers": [{"url": BASE_URL}],
    "components": {
        "parameters": {
            "notionVersion": {
                "name": "Notion-Version",
                "in": "header",
                "required": False,
                "schema": {"type": "string", "default": "2022-06-28"},
            },
        },
        "schemas": {
            "richTextRequest": {
                "type": "object",
                "properties": {
                    "text": {
                        "type": "object",
                        "properties": {
                            "content": {"type": "string"},
                            "link": {"type": ["object", "null"]},
                        },
                        "required": ["content"],
                    },
                    "type": {"type": "string", "enum": ["text"]},
                },
                "required": ["text"],
            },
            "pageIdParent": {
                "type": "object",
                "properties": {"page_id": {"type": "string"}},
                "required": ["page_id"],
            },
        },
    },
    "paths": {
        "/v1/users": {
            "get": {
                "operationId": "get-users",
                "summary": "List all users",
                "parameters": [
                    {"name": "start_cursor", "in": "query", "schema": {"type": "string"}},
                    {"name": "page_size", "in": "query", "schema": {"type": "integer", "default": 100}},
                ],
                "responses": {
                    "200": {"description": "200"},
                    "400": {"description": "Bad request"},
                },
            },
        },
        "/v1/users/{user_id}": {
            "parameters": [
                {"name": "user_id", "in": "path", "required": True, "schema": {"type": "string"}},
            ],
            "get": {
                "operationId": "get-user",
                "summary": "Retrieve a user",
                "parameters": [{"$ref": "#/components/parameters/notionVersion"}],
                "responses": {"200": {"description": "200"}},
            },
        },
        "/v1/pages": {
            "post": {
                "operationId": "post-page",
                "summary": "Create a page",
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "required": ["parent", "properties"],
                                "properties": {
                                    "parent": {"$ref": "#/components/schemas/pageIdParent"},
                                    "properties": {
                                        "type": "object",
                                        "properties": {
                                            "title": {
                                                "type": "array",
                                                "items": {"$ref": "#/components/schemas/richTextRequest"},
                                            },
                                        },
                                        "additionalProperties": False,
                                    },
                                    "children": {"type": "array", "items": {"type": "object"}},
                                },
                            },
                        },
                    },
                },
                "responses": {"200": {"description": "200"}},
            },
        },
        "/v1/pages/{page_id}": {
            "patch": {
                "operationId": "patch-page",
                "summary": "Update page properties",
                "parameters": [
                    {"name": "page_id", "in": "path", "required": True, "schema": {"type": "string"}},
                ],
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "properties": {
                                    "properties": {"type": "object", "additionalProperties": False},
                                    "archived": {"type": "boolean"},
                                },
                            },
                        },
                    },
                },
                "responses": {"200": {"description": "200"}},
            },
        },
        "/v1/search": {
            "post": {
                "operationId": "post-search",
                "summary": "Search by title",
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "properties": {
                                    "query": {"type": "string"},
                                    "filter": {
                                        "type": "object",
                                        "properties": {
                                            "property": {"type": "string"},
                                            "value": {"type": "string"},
                                        },
                                        "additionalProperties": False,
                                    },
                                    "page_size": {"type": "integer"},
                                },
                            },
                        },
                    },
                },
                "responses": {"200": {"description": "200"}},
            },
        },
        "/v1/blocks/{block_id}/children": {
            "get": {
                "operationId": "get-block-children",
                "summary": "Retrieve block children",
                "parameters": [
                    {"name": "block_id", "in": "path", "required": True, "schema": {"type": "string"}},
                    {"name": "page_size", "in": "query", "schema": {"type": "integer"}},
                ],
                "responses": {"200": {"description": "200"}},
            },
        },
        "/v1/file_uploads/{file_upload_id}/send": {
            "post": {
                "operationId": "send-file-upload",
                "summary": "Upload a file",
                "parameters": [
                    {"name": "file_upload_id", "in": "path", "required": True, "schema": {"type": "string"}},
                ],
                "requestBody": {
                    "content": {
                        "multipart/form-data": {
                            "schema": {
                                "type": "object",
                                "required": ["file"],
                                "properties": {
                                    "file": {"type": "string", "format": "binary"},
                                    "part_number": {"type": "string"},
                                },
                            },
                        },
                    },
                },
                "responses": {"200": {"description": "200"}},
            },
        },
    },
}


@pytest.fixture
def notion_spec():
    """Small Notion-shaped OpenAPI document."""
    return copy.deepcopy(_NOTION_SPEC)


@pytest.fixture
def conversion(notion_spec):
    """Conversion result of the sample document."""
    return SchemaConverter(notion_spec).convert()


@pytest.fixture
def executor():
    """Request executor whose client is replaced per test."""
    return RequestExecutor(BASE_URL, headers={"Authorization": "Bearer secret"})


@pytest.fixture
def mock_api(executor):
    """
    Install a mock transport on the executor.

    Call with a handler ``request -> httpx.Response``; returns the list the
    sent requests are collected in.
    """

    def install(handler):
        requests = []

        def _handle(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        executor._client = httpx.AsyncClient(
            base_url=executor.base_url,
            headers=executor.headers,
            transport=httpx.MockTransport(_handle),
        )
        return requests

    return install


@pytest.fixture
def dispatcher(conversion, executor):
    """Dispatcher over the sample document, installed as the process dispatcher."""
    instance = ToolDispatcher(conversion, executor)
    set_dispatcher(instance)
    yield instance
    set_dispatcher(None)


@pytest.fixture
def client(dispatcher):
    """Test client (lifespan not run; dispatcher installed by fixture)."""
    return TestClient(app)


@pytest.fixture
def auth_headers():
    """Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {_TEST_AUTH_TOKEN}"}


@pytest.fixture
def sample_user():
    return {
        "object": "user",
        "id": "user123",
        "type": "person",
        "name": "John Doe",
        "avatar_url": "https://example.com/avatar.jpg",
        "person": {"email": "john@example.com"},
    }


@pytest.fixture
def sample_search_results():
    return {
        "object": "list",
        "results": [
            {
                "object": "page",
                "id": "page123",
                "properties": {
                    "title": {
                        "type": "title",
                        "title": [
                            {
                                "type": "text",
                                "text": {"content": "My Page"},
                                "annotations": {"bold": False, "italic": False},
                                "plain_text": "My Page",
                                "href": None,
                            },
                        ],
                    },
                },
                "url": "https://notion.so/page123",
            },
            {
                "object": "database",
                "id": "db456",
                "title": [
                    {
                        "type": "text",
                        "text": {"content": "My Database"},
                        "plain_text": "My Database",
                        "href": None,
                    },
                ],
                "properties": {},
                "url": "https://notion.so/db456",
            },
        ],
        "next_cursor": None,
        "has_more": False,
    }
