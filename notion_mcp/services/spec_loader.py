# OpenAPI Spec Loader
"""Load an OpenAPI document from disk."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from notion_mcp.exceptions import ConfigurationError

logger = logging.getLogger("notion_mcp.services.spec_loader")


def load_openapi_spec(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a JSON or YAML OpenAPI document.

    Args:
        path: Location of the document

    Returns:
        Parsed document

    Raises:
        ConfigurationError: file missing, unparseable, or not a mapping
    """
    spec_path = Path(path)
    if not spec_path.exists():
        raise ConfigurationError(f"OpenAPI spec not found: {spec_path}")

    content = spec_path.read_text(encoding="utf-8")

    try:
        if spec_path.suffix.lower() in (".yaml", ".yml"):
            spec = yaml.safe_load(content)
        else:
            try:
                spec = json.loads(content)
            except json.JSONDecodeError:
                spec = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse OpenAPI spec {spec_path}: {e}") from e

    if not isinstance(spec, dict):
        raise ConfigurationError(f"OpenAPI spec {spec_path} is not an object")

    logger.info(
        f"Loaded OpenAPI spec {spec.get('info', {}).get('title', spec_path.name)} "
        f"({len(spec.get('paths') or {})} paths)"
    )
    return spec
