# OpenAPI Catalog Models
"""Models describing operations and tools derived from an OpenAPI document."""

from typing import Any, Dict, List, Literal, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

ParameterLocation = Literal["path", "query", "header", "cookie"]


class ParameterDescriptor(BaseModel):
    """One declared operation parameter."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation
    required: bool = False
    schema_: Dict[str, Any] = Field(default_factory=dict, alias="schema")
    description: Optional[str] = None


class OperationDescriptor(BaseModel):
    """
    Binding of one tool to an HTTP endpoint of the wrapped API.

    Built once by the schema converter and read-only afterwards. The
    ``file_parameters`` list marks operations that must be sent as
    multipart/form-data.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    operation_id: str
    method: str
    path: str
    parameters: List[ParameterDescriptor] = Field(default_factory=list)
    request_body_schema: Optional[Dict[str, Any]] = None
    has_request_body: bool = False
    response_schema: Optional[Dict[str, Any]] = None
    file_parameters: List[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None

    def parameter_names(self, *locations: str) -> List[str]:
        """Names of declared parameters, optionally restricted to locations."""
        return [
            p.name for p in self.parameters
            if not locations or p.location in locations
        ]

    def accepted_names(self) -> List[str]:
        """Every argument name the operation understands."""
        names = self.parameter_names("path", "query", "header")
        body = self.request_body_schema or {}
        for key in (body.get("properties") or {}):
            if key not in names:
                names.append(key)
        return names


class ToolMethod(BaseModel):
    """A single callable method of a tool definition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str = ""
    input_schema: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        alias="inputSchema",
    )
    return_schema: Optional[Dict[str, Any]] = Field(default=None, alias="returnSchema")


class ToolDefinition(BaseModel):
    """Methods grouped under one logical API name."""

    model_config = ConfigDict(frozen=True)

    methods: List[ToolMethod] = Field(default_factory=list)


class CatalogEntry(BaseModel):
    """Published tool: the method plus the operation it executes."""

    model_config = ConfigDict(frozen=True)

    name: str
    full_name: str
    method: ToolMethod
    operation: OperationDescriptor


class ConversionResult(BaseModel):
    """Output of the schema converter, before names are published."""

    model_config = ConfigDict(frozen=True)

    tools: Dict[str, ToolDefinition]
    openapi_lookup: Dict[str, OperationDescriptor]
    base_url: str


class ExecutionResult(BaseModel):
    """Normalized response of the wrapped API."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any = None
    status: int
    headers: httpx.Headers = Field(default_factory=httpx.Headers)
