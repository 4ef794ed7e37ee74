"""
Custom exceptions module.

Run-abort errors stop the import; per-record errors are collected
into the settled results and reported.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,
    ExternalServiceError,

    # Configuration
    SourceConfigurationError,
    MappingConfigurationError,

    # Source reader
    SourceReadError,

    # Contentful
    ContentfulApiError,
    ContentfulRequestError,
    AssetProcessingTimeoutError,
    AssetSourceMissingError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",
    "ExternalServiceError",

    # Configuration
    "SourceConfigurationError",
    "MappingConfigurationError",

    # Source reader
    "SourceReadError",

    # Contentful
    "ContentfulApiError",
    "ContentfulRequestError",
    "AssetProcessingTimeoutError",
    "AssetSourceMissingError",
]
