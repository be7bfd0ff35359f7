# Schema Converter Service
"""
Converts an OpenAPI 3.x document into MCP tool methods.

Each operation becomes one ToolMethod whose input schema is a flat object:
path/query/header parameters and the top-level request body properties share
one namespace. Local ``$ref`` pointers are inlined. A fragment that cannot be
resolved or fails JSON Schema meta-validation degrades to ``{}`` (accept any
value) for that one property; the rest of the document still converts.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft4Validator, Draft202012Validator
from jsonschema.exceptions import SchemaError

from notion_mcp.exceptions import ConfigurationError
from notion_mcp.models.openapi import (
    ConversionResult,
    OperationDescriptor,
    ParameterDescriptor,
    ToolDefinition,
    ToolMethod,
)
from notion_mcp.services.tool_filter import ToolFilterConfig, should_include_operation

logger = logging.getLogger("notion_mcp.services.schema_converter")

HTTP_METHODS = ("get", "put", "post", "delete", "patch", "head", "options", "trace")

# operationId -> request body fields whose ``additionalProperties: false`` is
# relaxed. These fields are caller-defined key/value maps (page properties are
# keyed by the user's own property names), so a static ``false`` rejects
# legitimate calls.
ADDITIONAL_PROPERTIES_OVERRIDES: Dict[str, Tuple[str, ...]] = {
    "post-page": ("properties",),
    "patch-page": ("properties",),
}

_BODY_MEDIA_TYPES = ("application/json", "multipart/form-data")


class _UnresolvedReference(Exception):
    pass


class SchemaConverter:
    """
    Converts an OpenAPI document into a tool definition and operation lookup.

    The converter performs no I/O; the document must already be parsed.
    """

    def __init__(
        self,
        spec: Dict[str, Any],
        api_name: str = "API",
        base_url: Optional[str] = None,
        tool_filter: Optional[ToolFilterConfig] = None,
    ):
        self.spec = spec
        self.api_name = api_name
        self.base_url = base_url
        self.tool_filter = tool_filter
        version = str(spec.get("openapi", "3.0"))
        self._validator_cls = Draft202012Validator if version.startswith("3.1") else Draft4Validator

    def convert(self) -> ConversionResult:
        """
        Build the tool definition and the operation lookup.

        Returns:
            ConversionResult keyed by api name / method name

        Raises:
            ConfigurationError: no server URL, or an operation without operationId
        """
        base_url = self.base_url or self._server_url()
        if not base_url:
            raise ConfigurationError("No base URL found in OpenAPI spec (servers[0].url)")

        methods: List[ToolMethod] = []
        lookup: Dict[str, OperationDescriptor] = {}

        for path, path_item in (self.spec.get("paths") or {}).items():
            if not isinstance(path_item, dict):
                continue
            shared_parameters = path_item.get("parameters") or []

            for http_method in HTTP_METHODS:
                operation = path_item.get(http_method)
                if not isinstance(operation, dict):
                    continue

                operation_id = operation.get("operationId")
                if not operation_id:
                    raise ConfigurationError(
                        f"Operation {http_method.upper()} {path} has no operationId"
                    )

                if not should_include_operation(operation_id, path, self.tool_filter):
                    logger.debug(f"Filtered out operation {operation_id}")
                    continue

                descriptor = self._build_operation(
                    operation_id, http_method, path, operation, shared_parameters
                )
                methods.append(self._build_tool_method(descriptor, operation))
                lookup[operation_id] = descriptor

        logger.info(f"Converted {len(methods)} operations into tools")
        return ConversionResult(
            tools={self.api_name: ToolDefinition(methods=methods)},
            openapi_lookup=lookup,
            base_url=base_url,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _server_url(self) -> Optional[str]:
        servers = self.spec.get("servers") or []
        if not servers or not isinstance(servers[0], dict):
            return None
        url = servers[0].get("url")
        for key, meta in (servers[0].get("variables") or {}).items():
            default = meta.get("default") if isinstance(meta, dict) else None
            if url and default is not None:
                url = url.replace(f"{{{key}}}", str(default))
        return url

    def _build_operation(
        self,
        operation_id: str,
        http_method: str,
        path: str,
        operation: Dict[str, Any],
        shared_parameters: List[Any],
    ) -> OperationDescriptor:
        parameters = self._merge_parameters(shared_parameters, operation.get("parameters") or [])
        body_schema, media_type = self._request_body_schema(operation)

        file_parameters: List[str] = []
        if body_schema is not None and media_type == "multipart/form-data":
            file_parameters = [
                name for name, prop in (body_schema.get("properties") or {}).items()
                if _is_binary(prop)
            ]

        return OperationDescriptor(
            operation_id=operation_id,
            method=http_method.upper(),
            path=path,
            parameters=parameters,
            request_body_schema=body_schema,
            has_request_body="requestBody" in operation,
            response_schema=self._response_schema(operation),
            file_parameters=file_parameters,
            summary=operation.get("summary"),
            description=operation.get("description"),
        )

    def _merge_parameters(
        self,
        shared: List[Any],
        own: List[Any],
    ) -> List[ParameterDescriptor]:
        """Path-level parameters overridden by operation-level ones (same name+in)."""
        merged: Dict[Tuple[str, str], ParameterDescriptor] = {}
        for raw in list(shared) + list(own):
            param = self._resolve_node(raw)
            if not isinstance(param, dict) or not param.get("name"):
                continue
            location = param.get("in")
            if location not in ("path", "query", "header", "cookie"):
                continue

            schema = param.get("schema")
            if schema is None and isinstance(param.get("content"), dict):
                media = next(iter(param["content"].values()), {})
                schema = media.get("schema") if isinstance(media, dict) else None
            schema = self._property_schema(
                schema if schema is not None else {"type": "string"},
                f"parameter {param['name']}",
            )
            if param.get("description") and "description" not in schema:
                schema = {**schema, "description": param["description"]}

            merged[(param["name"], location)] = ParameterDescriptor(
                name=param["name"],
                location=location,
                required=bool(param.get("required")) or location == "path",
                schema=schema,
                description=param.get("description"),
            )
        return list(merged.values())

    def _request_body_schema(
        self,
        operation: Dict[str, Any],
    ) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        body = self._resolve_node(operation.get("requestBody"))
        if not isinstance(body, dict):
            return None, None
        content = body.get("content") or {}
        media_type = next((m for m in _BODY_MEDIA_TYPES if m in content), None)
        if media_type is None:
            media_type = next(iter(content), None)
        if media_type is None or not isinstance(content[media_type], dict):
            return None, None

        raw_schema = content[media_type].get("schema")
        if raw_schema is None:
            return None, media_type

        schema = self._resolve_node(raw_schema)
        if not isinstance(schema, dict):
            return {}, media_type
        properties, required = _object_properties(schema)

        operation_id = operation.get("operationId", "")
        clean: Dict[str, Any] = {}
        for name, prop in properties.items():
            prop = self._property_schema(prop, f"{operation_id}.{name}", resolved=True)
            if name in ADDITIONAL_PROPERTIES_OVERRIDES.get(operation_id, ()):
                prop = _allow_additional_properties(prop, operation_id, name)
            clean[name] = prop

        result = {k: v for k, v in schema.items() if k not in ("properties", "required", "allOf")}
        result["type"] = "object"
        result["properties"] = clean
        if required:
            result["required"] = required
        return result, media_type

    def _response_schema(self, operation: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        responses = operation.get("responses") or {}
        for status, response in sorted(responses.items(), key=lambda item: str(item[0])):
            if not str(status).startswith("2"):
                continue
            response = self._resolve_node(response)
            if not isinstance(response, dict):
                continue
            media = (response.get("content") or {}).get("application/json")
            if isinstance(media, dict) and "schema" in media:
                return self._property_schema(media["schema"], f"{operation.get('operationId')} response")
        return None

    # ------------------------------------------------------------------
    # Tool methods
    # ------------------------------------------------------------------

    def _build_tool_method(
        self,
        descriptor: OperationDescriptor,
        operation: Dict[str, Any],
    ) -> ToolMethod:
        properties: Dict[str, Any] = {}
        required: List[str] = []

        for param in descriptor.parameters:
            if param.location == "cookie":
                continue
            properties[param.name] = param.schema_
            if param.required:
                required.append(param.name)

        body = descriptor.request_body_schema or {}
        for name, prop in (body.get("properties") or {}).items():
            if name in properties:
                logger.debug(
                    f"{descriptor.operation_id}: body property {name} shadowed by parameter"
                )
                continue
            properties[name] = prop
        for name in body.get("required") or []:
            if name in properties and name not in required:
                required.append(name)

        input_schema: Dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            input_schema["required"] = required

        return ToolMethod(
            name=descriptor.operation_id,
            description=self._describe(descriptor, operation),
            input_schema=input_schema,
            return_schema=descriptor.response_schema,
        )

    def _describe(self, descriptor: OperationDescriptor, operation: Dict[str, Any]) -> str:
        parts: List[str] = []
        if descriptor.summary:
            parts.append(descriptor.summary)
        if descriptor.description and descriptor.description != descriptor.summary:
            parts.append(descriptor.description)

        errors: List[str] = []
        for status, response in (operation.get("responses") or {}).items():
            status = str(status)
            if status == "default" or status[:1] in ("4", "5"):
                response = self._resolve_node(response)
                text = response.get("description", "") if isinstance(response, dict) else ""
                errors.append(f"- {status}: {text}".rstrip(": "))
        if errors:
            parts.append("Error Responses:\n" + "\n".join(errors))

        return "\n\n".join(parts)

    # ------------------------------------------------------------------
    # Schema resolution
    # ------------------------------------------------------------------

    def _property_schema(self, fragment: Any, label: str, resolved: bool = False) -> Dict[str, Any]:
        """Resolve and meta-validate one property schema, degrading to ``{}``."""
        schema = fragment if resolved else self._resolve_node(fragment)
        if not isinstance(schema, dict):
            logger.warning(f"Schema for {label} is not an object; accepting any value")
            return {}
        try:
            self._validator_cls.check_schema(schema)
        except SchemaError as e:
            logger.warning(f"Unsupported schema for {label} ({e.message}); accepting any value")
            return {}
        return schema

    def _resolve_node(self, node: Any) -> Any:
        return self._resolve(node, ())

    def _resolve(self, node: Any, stack: Tuple[str, ...]) -> Any:
        if isinstance(node, list):
            return [self._resolve(item, stack) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            try:
                if ref in stack:
                    raise _UnresolvedReference(f"circular reference {ref}")
                target = self._pointer(ref)
            except _UnresolvedReference as e:
                logger.warning(f"Cannot resolve {e}; accepting any value")
                return {}
            resolved = self._resolve(target, stack + (ref,))
            siblings = {k: v for k, v in node.items() if k != "$ref"}
            if siblings and isinstance(resolved, dict):
                resolved = {**resolved, **self._resolve(siblings, stack)}
            return resolved

        return {key: self._resolve(value, stack) for key, value in node.items()}

    def _pointer(self, ref: str) -> Any:
        if not ref.startswith("#/"):
            raise _UnresolvedReference(f"external reference {ref}")
        current: Any = self.spec
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(current, dict) or part not in current:
                raise _UnresolvedReference(f"reference {ref}")
            current = current[part]
        return copy.deepcopy(current)


def _object_properties(schema: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Top-level properties and required names, merging ``allOf`` branches."""
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for branch in schema.get("allOf") or []:
        if isinstance(branch, dict):
            branch_props, branch_required = _object_properties(branch)
            properties.update(branch_props)
            required.extend(r for r in branch_required if r not in required)
    if isinstance(schema.get("properties"), dict):
        properties.update(schema["properties"])
    for name in schema.get("required") or []:
        if name not in required:
            required.append(name)
    return properties, required


def _allow_additional_properties(prop: Dict[str, Any], operation_id: str, name: str) -> Dict[str, Any]:
    if prop.get("additionalProperties") is False:
        logger.debug(f"{operation_id}: allowing additional properties in {name}")
        return {**prop, "additionalProperties": True}
    return prop


def _is_binary(prop: Any) -> bool:
    if not isinstance(prop, dict):
        return False
    if prop.get("type") == "string" and prop.get("format") == "binary":
        return True
    return prop.get("type") == "array" and _is_binary(prop.get("items"))
