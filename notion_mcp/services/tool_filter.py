# Tool Filter Service
"""Decide which OpenAPI operations are exposed as tools."""

import re
from dataclasses import dataclass, field
from typing import List, Optional

_RESOURCE_TYPES = {"search", "users", "pages", "blocks", "databases", "comments"}
_RESOURCE_PATH = re.compile(r"^/v1/([^/]+)")


@dataclass(frozen=True)
class ToolFilterConfig:
    """Include/exclude globs on operationId plus a resource-type allowlist."""

    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    resource_types: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.include or self.exclude or self.resource_types)


def matches_pattern(value: str, pattern: str) -> bool:
    """Case-insensitive glob match supporting ``*`` and ``?``."""
    regex = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
    return re.fullmatch(regex, value, flags=re.IGNORECASE) is not None


def matches_any_pattern(value: str, patterns: List[str]) -> bool:
    return any(matches_pattern(value, p) for p in patterns)


def extract_resource_type(path: str) -> Optional[str]:
    """Resource type from a ``/v1/<resource>/...`` path, if recognized."""
    match = _RESOURCE_PATH.match(path)
    if not match:
        return None
    segment = match.group(1)
    return segment if segment in _RESOURCE_TYPES else None


def should_include_operation(
    operation_id: str,
    path: str,
    config: Optional[ToolFilterConfig] = None,
) -> bool:
    """Apply resource-type, include and exclude rules in that order."""
    if config is None:
        return True

    if config.resource_types:
        resource_type = extract_resource_type(path)
        if not resource_type or resource_type not in config.resource_types:
            return False

    if config.include and not matches_any_pattern(operation_id, config.include):
        return False

    if config.exclude and matches_any_pattern(operation_id, config.exclude):
        return False

    return True
