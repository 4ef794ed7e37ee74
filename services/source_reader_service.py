"""
Source reader service.

Retrieves raw external records either from a REST endpoint or from a
local JSON file. Both shapes carry the records under a top-level "data"
property.
"""

import json
from pathlib import Path
from typing import Any, Optional, Union
import requests
import structlog

from models.source import ExternalSource
from exceptions import SourceReadError

logger = structlog.get_logger(__name__)


def _extract_data(payload: Any, origin: str) -> list[dict[str, Any]]:
    """Pull the record list out of a {"data": [...]} document."""
    if not isinstance(payload, dict) or "data" not in payload:
        raise SourceReadError(
            "Source document has no top-level 'data' property",
            details={"origin": origin}
        )

    data = payload["data"]
    if not isinstance(data, list):
        raise SourceReadError(
            "Source 'data' property is not a list",
            details={"origin": origin, "type": type(data).__name__}
        )
    return data


def read_from_url(
    url: str,
    headers: Optional[dict[str, str]] = None,
    *,
    timeout_s: float = 30.0,
    log=None,
) -> list[dict[str, Any]]:
    """
    GET the endpoint and return its 'data' records.

    Raises:
        SourceReadError: Network error, non-2xx status or non-JSON body
    """
    log = log or logger
    log.info("getting_external_data", mode="url", url=url)

    try:
        response = requests.get(url, headers=headers or {}, timeout=timeout_s)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise SourceReadError(
            f"Failed to fetch external data: {e}",
            details={"url": url}
        ) from e

    try:
        payload = response.json()
    except ValueError as e:
        raise SourceReadError(
            "External endpoint did not return JSON",
            details={"url": url}
        ) from e

    return _extract_data(payload, url)


def read_from_file(
    local_file_path: str,
    *,
    config_dir: Union[str, Path] = "config",
    log=None,
) -> list[dict[str, Any]]:
    """
    Read <config_dir>/<local_file_path> as UTF-8 JSON and return its 'data' records.

    Raises:
        SourceReadError: Missing file or invalid JSON
    """
    log = log or logger
    path = Path(config_dir).resolve() / local_file_path
    log.info("getting_external_data", mode="file", path=str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SourceReadError(
            f"Could not read source file: {path}",
            details={"path": str(path), "reason": str(e)}
        ) from e

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise SourceReadError(
            f"Source file is not valid JSON: {e.msg}",
            details={"path": str(path), "line": e.lineno}
        ) from e

    return _extract_data(payload, str(path))


def read_external_records(
    source: ExternalSource,
    *,
    config_dir: Union[str, Path] = "config",
    timeout_s: float = 30.0,
    log=None,
) -> list[dict[str, Any]]:
    """
    Read raw records from the configured source.

    Args:
        source: URL or local file selection
        config_dir: Base directory for local files
        timeout_s: HTTP timeout for URL mode
        log: Run logger

    Returns:
        Raw records in source order
    """
    log = log or logger

    if source.url:
        records = read_from_url(source.url, source.headers, timeout_s=timeout_s, log=log)
    else:
        records = read_from_file(source.local_file_path, config_dir=config_dir, log=log)

    log.info("external_data_loaded", mode=source.mode, records=len(records))
    return records
