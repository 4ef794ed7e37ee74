"""
Custom exception classes for the importer.

Two tiers matter at runtime:
    - Run-abort errors (configuration, connection, validation, source read)
      stop the import before any record is processed.
    - Per-record errors (Contentful API / transport failures inside one
      record's chain) are collected by the batch runner and reported.
"""

import json
from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all importer errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "SOURCE_READ_ERROR")
        message: Human-readable message
        status_code: HTTP-like status code describing the error class
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to a structured log/report payload."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


# ===================
# CONFIGURATION ERRORS
# ===================

class SourceConfigurationError(ValidationError):
    """External source selection is ambiguous or missing."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="SOURCE_CONFIGURATION_ERROR",
            message=message,
            details=details
        )


class MappingConfigurationError(ValidationError):
    """Field mapping configuration could not be loaded or parsed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="MAPPING_CONFIGURATION_ERROR",
            message=message,
            details=details
        )


# ===================
# SOURCE READER ERRORS
# ===================

class SourceReadError(ExternalServiceError):
    """External records could not be fetched, read or parsed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            service="external_source",
            message=message,
            details=details,
            code="SOURCE_READ_ERROR"
        )


# ===================
# CONTENTFUL ERRORS
# ===================

class ContentfulApiError(ExternalServiceError):
    """
    Contentful Management API answered with a non-2xx status.

    The exception message is the JSON-serialized error payload, so callers
    can recover the structured fields with ``json.loads(str(error))``:

        {
            "status": 409,
            "statusText": "Conflict",
            "message": "...",
            "details": {...},
            "request": {"url": ..., "method": ..., "headers": ..., "payloadData": ...},
            "requestId": "..."
        }
    """

    def __init__(self, payload: dict[str, Any]):
        self.payload = payload
        self.http_status = payload.get("status")
        request = payload.get("request") or {}
        super().__init__(
            service="contentful",
            message=json.dumps(payload, default=str),
            details={
                "http_status": self.http_status,
                "request_url": request.get("url"),
            },
            code="CONTENTFUL_API_ERROR"
        )


class ContentfulRequestError(ExternalServiceError):
    """Request to Contentful never produced a response (timeout, connection reset)."""

    def __init__(self, method: str, url: str, reason: str):
        super().__init__(
            service="contentful",
            message=f"Contentful request {method} {url} failed: {reason}",
            details={"method": method, "url": url},
            code="CONTENTFUL_REQUEST_ERROR"
        )


class AssetProcessingTimeoutError(ExternalServiceError):
    """Asset file processing did not finish within the polling budget."""

    def __init__(self, asset_id: str, attempts: int):
        super().__init__(
            service="contentful",
            message=f"Asset {asset_id} was not processed after {attempts} checks",
            details={"asset_id": asset_id, "attempts": attempts},
            code="ASSET_PROCESSING_TIMEOUT"
        )


class AssetSourceMissingError(ValidationError):
    """Normalized record has no upload URL for its asset."""

    def __init__(self, record_index: int, upload_field: str):
        super().__init__(
            code="ASSET_SOURCE_MISSING",
            message=f"Record {record_index} has no value for asset upload field '{upload_field}'",
            details={"record_index": record_index, "upload_field": upload_field}
        )
