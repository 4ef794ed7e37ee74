"""
Field mapping configuration.

DEFAULT_FIELD_MAPPING is the mapping used when no mapping file is given.
Mapping files are JSON documents in the config directory with the same
flat shape.
"""

import json
from pathlib import Path
from typing import Any, Optional, Union
import structlog
from pydantic import ValidationError as PydanticValidationError

from models.mapping import MappingConfig
from exceptions import MappingConfigurationError

logger = structlog.get_logger(__name__)


DEFAULT_FIELD_MAPPING: dict[str, Any] = {
    "title": {"type": "Symbol", "externalKey": "id"},
    "postBody": {"type": "Symbol", "externalKey": "text"},
    "postAuthor": {"type": "Symbol", "externalKey": "likes"},
    "image": {"type": "image", "externalKey": "image"},
    "assetLabels": {
        "title": "title",
        "upload": "image",
        "contentType": "image",
    },
}


def parse_mapping(raw: dict[str, Any]) -> MappingConfig:
    """
    Validate a flat mapping dictionary.

    Args:
        raw: Mapping in its hand-authored shape

    Returns:
        MappingConfig

    Raises:
        MappingConfigurationError: If the mapping is malformed
    """
    try:
        return MappingConfig.model_validate(raw)
    except PydanticValidationError as e:
        raise MappingConfigurationError(
            "Invalid field mapping",
            details={"errors": e.errors(include_url=False, include_input=False, include_context=False)}
        ) from e


def load_mapping(
    mapping_file: Optional[str] = None,
    config_dir: Union[str, Path] = "config"
) -> MappingConfig:
    """
    Load the field mapping for this run.

    Args:
        mapping_file: JSON file relative to config_dir, or None for the default
        config_dir: Directory holding mapping files

    Returns:
        MappingConfig

    Raises:
        MappingConfigurationError: If the file is missing, not JSON, or malformed
    """
    if not mapping_file:
        logger.debug("using_default_field_mapping")
        return parse_mapping(DEFAULT_FIELD_MAPPING)

    path = Path(config_dir) / mapping_file
    logger.info("loading_field_mapping", path=str(path))

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise MappingConfigurationError(
            f"Mapping file not found: {path}",
            details={"path": str(path)}
        ) from e
    except json.JSONDecodeError as e:
        raise MappingConfigurationError(
            f"Mapping file is not valid JSON: {e.msg}",
            details={"path": str(path), "line": e.lineno}
        ) from e

    if not isinstance(raw, dict):
        raise MappingConfigurationError(
            "Mapping file must contain a JSON object",
            details={"path": str(path)}
        )

    return parse_mapping(raw)
