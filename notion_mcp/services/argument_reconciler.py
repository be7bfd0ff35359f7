# Argument Reconciler Service
"""
Adapts loosely typed tool arguments to the schema an operation declares.

LLM callers often send nested objects as JSON strings and numbers or booleans
as strings. Advertised input schemas are widened so such calls pass client-side
validation (see ``widen_object_schemas``); the functions here then narrow the
values back server-side. Nothing in this module raises: a value that cannot be
reconciled is returned unchanged.
"""

import copy
import json
import logging
import math
import re
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger("notion_mcp.services.argument_reconciler")

_COMBINATORS = ("oneOf", "anyOf", "allOf")

# JSON number grammar, ASCII digits only
_INTEGER_LITERAL = re.compile(r"-?(?:0|[1-9][0-9]*)")
_NUMBER_LITERAL = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")


# ----------------------------------------------------------------------
# Schema inspection
# ----------------------------------------------------------------------

def _branches(schema: Any) -> Iterator[Dict[str, Any]]:
    """The node itself followed by every combinator branch, depth first."""
    if not isinstance(schema, dict):
        return
    yield schema
    for key in _COMBINATORS:
        for branch in schema.get(key) or []:
            yield from _branches(branch)


def _declares(schema: Dict[str, Any], type_name: str) -> bool:
    declared = schema.get("type")
    if isinstance(declared, list):
        return type_name in declared
    return declared == type_name


def expects_type(schema: Any, type_name: str) -> bool:
    """True if the node, or any branch of its unions, declares ``type_name``."""
    for branch in _branches(schema):
        if _declares(branch, type_name):
            return True
        if type_name == "object" and "properties" in branch and "type" not in branch:
            return True
        if type_name == "array" and "items" in branch and "type" not in branch:
            return True
    return False


def property_schema(schema: Any, key: str) -> Optional[Dict[str, Any]]:
    """Schema of property ``key`` in any object branch, or None if undeclared."""
    for branch in _branches(schema):
        props = branch.get("properties")
        if isinstance(props, dict) and isinstance(props.get(key), dict):
            return props[key]
    for branch in _branches(schema):
        extra = branch.get("additionalProperties")
        if isinstance(extra, dict):
            return extra
    return None


def items_schema(schema: Any) -> Optional[Dict[str, Any]]:
    """Schema of array items in any array branch."""
    for branch in _branches(schema):
        items = branch.get("items")
        if isinstance(items, dict):
            return items
    return None


# ----------------------------------------------------------------------
# Stringified-structure recovery
# ----------------------------------------------------------------------

def parse_stringified_structures(value: Any, schema: Any) -> Any:
    """
    Replace JSON strings with the structures their schema node expects.

    Args:
        value: Argument value as supplied by the caller
        schema: Schema node describing the value

    Returns:
        Value with stringified objects/arrays parsed, recursively
    """
    if not isinstance(schema, dict) or not schema:
        return value

    if isinstance(value, str) and (expects_type(schema, "object") or expects_type(schema, "array")):
        try:
            parsed = json.loads(value)
        except ValueError:
            return value
        if not isinstance(parsed, (dict, list)):
            return value
        value = parsed

    if isinstance(value, dict):
        return {
            key: parse_stringified_structures(item, property_schema(schema, key))
            for key, item in value.items()
        }
    if isinstance(value, list):
        item_schema = items_schema(schema)
        return [parse_stringified_structures(item, item_schema) for item in value]
    return value


# ----------------------------------------------------------------------
# Primitive coercion
# ----------------------------------------------------------------------

def _coerce_integer(value: str) -> Any:
    if not _INTEGER_LITERAL.fullmatch(value):
        return value
    return int(value)


def _coerce_number(value: str) -> Any:
    if _INTEGER_LITERAL.fullmatch(value):
        return int(value)
    if not _NUMBER_LITERAL.fullmatch(value):
        return value
    number = float(value)
    return number if math.isfinite(number) else value


def _coerce_boolean(value: str) -> Any:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value


def coerce_primitive_types(value: Any, schema: Any) -> Any:
    """
    Convert string values to the integer, number or boolean their schema declares.

    Strings that are not valid literals of the target type are left untouched.
    """
    if not isinstance(schema, dict) or value is None:
        return value

    if isinstance(value, str):
        if expects_type(schema, "string"):
            return value
        if expects_type(schema, "integer"):
            return _coerce_integer(value)
        if expects_type(schema, "number"):
            return _coerce_number(value)
        if expects_type(schema, "boolean"):
            return _coerce_boolean(value)
        return value

    if isinstance(value, dict):
        return {
            key: coerce_primitive_types(item, property_schema(schema, key))
            for key, item in value.items()
        }
    if isinstance(value, list):
        item_schema = items_schema(schema)
        return [coerce_primitive_types(item, item_schema) for item in value]
    return value


# ----------------------------------------------------------------------
# Rich text normalization
# ----------------------------------------------------------------------

def normalize_rich_text(items: List[Any]) -> List[Any]:
    """Move ``text.annotations`` up to the rich text item's ``annotations``."""
    normalized = []
    for item in items:
        if isinstance(item, dict):
            text = item.get("text")
            if isinstance(text, dict) and "annotations" in text:
                text = dict(text)
                annotations = text.pop("annotations")
                item = {**item, "text": text}
                if "annotations" not in item:
                    item["annotations"] = annotations
        normalized.append(normalize_request_payload(item))
    return normalized


def normalize_request_payload(value: Any) -> Any:
    """Apply rich text normalization to every ``rich_text`` array in the payload."""
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            if key == "rich_text" and isinstance(item, list):
                result[key] = normalize_rich_text(item)
            else:
                result[key] = normalize_request_payload(item)
        return result
    if isinstance(value, list):
        return [normalize_request_payload(item) for item in value]
    return value


def reconcile_arguments(arguments: Optional[Dict[str, Any]], input_schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Full reconciliation pipeline for one call's argument set.

    Args:
        arguments: Caller-supplied arguments
        input_schema: The tool's strict input schema

    Returns:
        New argument mapping; the input is not modified
    """
    if not arguments:
        return {}
    reconciled = parse_stringified_structures(arguments, input_schema)
    reconciled = coerce_primitive_types(reconciled, input_schema)
    reconciled = normalize_request_payload(reconciled)
    changed = sorted(key for key in arguments if reconciled.get(key) != arguments[key])
    if changed:
        logger.debug(f"Reconciled arguments: {changed}")
    return reconciled


# ----------------------------------------------------------------------
# Schema widening
# ----------------------------------------------------------------------

def widen_object_schemas(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of ``schema`` where every nested object node also accepts a string.

    The root stays an object schema; below it each node expecting an object
    becomes ``{"anyOf": [{"type": "string"}, <node>]}``.
    """
    widened = copy.deepcopy(schema)
    return _widen_children(widened)


def _widen(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    node = _widen_children(node)
    if expects_type(node, "object") and not expects_type(node, "string"):
        return {"anyOf": [{"type": "string"}, node]}
    return node


def _widen_children(node: Dict[str, Any]) -> Dict[str, Any]:
    props = node.get("properties")
    if isinstance(props, dict):
        node["properties"] = {key: _widen(value) for key, value in props.items()}
    if isinstance(node.get("items"), dict):
        node["items"] = _widen(node["items"])
    if isinstance(node.get("additionalProperties"), dict):
        node["additionalProperties"] = _widen(node["additionalProperties"])
    for key in _COMBINATORS:
        if isinstance(node.get(key), list):
            node[key] = [_widen_children(b) if isinstance(b, dict) else b for b in node[key]]
    return node
