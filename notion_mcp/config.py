# Gateway Configuration
"""Configuration settings loaded from environment variables."""

import json
import logging
from typing import Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("notion_mcp.config")


class Settings(BaseSettings):
    """Notion MCP gateway settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAPI source
    openapi_spec_path: str = Field(
        default="notion-openapi.json",
        description="Path to the OpenAPI document (JSON or YAML)",
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Override for servers[0].url of the OpenAPI document",
    )
    api_name: str = Field(default="API", description="Prefix of published tool names")
    tool_name_max_length: int = Field(default=64, description="Maximum tool name length")

    # Wrapped API credentials
    openapi_mcp_headers: Optional[str] = Field(
        default=None,
        description="JSON object of headers sent with every API request",
    )
    notion_token: Optional[str] = Field(default=None, description="Notion integration token")
    notion_version: str = Field(default="2022-06-28", description="Notion-Version header")

    # Wrapped API client
    request_timeout: float = Field(default=30.0, description="API request timeout in seconds")
    user_agent: str = Field(default="notion-mcp-gateway", description="User-Agent header")

    # Output
    format_responses: bool = Field(
        default=True,
        description="Render responses as readable text instead of raw JSON",
    )

    # Tool filtering
    tool_include: List[str] = Field(default_factory=list, description="operationId glob allowlist")
    tool_exclude: List[str] = Field(default_factory=list, description="operationId glob denylist")
    tool_resource_types: List[str] = Field(
        default_factory=list,
        description="Resource types to expose (pages, blocks, databases, ...)",
    )

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    auth_token: str = Field(
        default="",
        description="Bearer token required on the HTTP transport (empty = no auth)",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # MCP protocol settings
    mcp_server_name: str = Field(default="notion-mcp", description="MCP server name")
    mcp_server_version: str = Field(default="1.0.0", description="MCP server version")

    def resolve_api_headers(self) -> Dict[str, str]:
        """
        Assemble the static headers injected into every API request.

        A non-empty JSON object in OPENAPI_MCP_HEADERS wins. Otherwise
        NOTION_TOKEN yields a bearer token plus the Notion-Version header.
        Otherwise no credentials are sent.
        """
        if self.openapi_mcp_headers:
            try:
                headers = json.loads(self.openapi_mcp_headers)
            except json.JSONDecodeError as e:
                logger.warning(f"Failed to parse OPENAPI_MCP_HEADERS: {e}")
            else:
                if not isinstance(headers, dict):
                    logger.warning(
                        "OPENAPI_MCP_HEADERS must be a JSON object, got: "
                        f"{type(headers).__name__}"
                    )
                elif headers:
                    return {str(k): str(v) for k, v in headers.items()}

        if self.notion_token:
            return {
                "Authorization": f"Bearer {self.notion_token}",
                "Notion-Version": self.notion_version,
            }

        return {}


# Global settings instance
settings = Settings()
