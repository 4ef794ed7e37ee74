"""
Importer settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Values come from the process environment or a .env file.
"""

import json
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from typing import Optional

from models.source import ContentfulConnection, ExternalSource


class Settings(BaseSettings):
    """
    Importer settings.

    All values loaded from .env file or environment variables.
    Validation happens when the settings object is built.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # CONTENTFUL
    # ===================
    contentful_access_token: str = Field(
        ...,
        repr=False,
        description="Content Management API token"
    )
    contentful_space_id: str = Field(
        ...,
        description="Target space ID"
    )
    contentful_environment_id: str = Field(
        default="master",
        description="Target environment ID"
    )
    contentful_locale_id: str = Field(
        ...,
        description="Locale identifier (resolved to a locale code such as en-US)"
    )
    contentful_content_type_id: str = Field(
        ...,
        description="Content type the imported entries belong to"
    )
    contentful_api_url: str = Field(
        default="https://api.contentful.com",
        description="Content Management API base URL"
    )

    # ===================
    # EXTERNAL SOURCE
    # ===================
    external_source: Optional[str] = Field(
        None,
        description="Local JSON file, relative to source_config_dir"
    )
    external_source_url: Optional[str] = Field(
        None,
        description="REST endpoint returning {'data': [...]}"
    )
    external_source_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers for the source GET, as a JSON object"
    )
    source_config_dir: str = Field(
        default="config",
        description="Directory holding source files and mapping files"
    )
    field_mapping_file: Optional[str] = Field(
        None,
        description="Mapping JSON file in source_config_dir (built-in default when unset)"
    )

    # ===================
    # IMPORT TUNING
    # ===================
    import_max_workers: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Records imported concurrently"
    )
    import_record_limit: Optional[int] = Field(
        None,
        ge=1,
        description="Only import the first N source records"
    )
    request_timeout_s: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for every HTTP call"
    )
    asset_processing_check_wait_s: float = Field(
        default=0.5,
        ge=0,
        le=30,
        description="Delay between asset processing checks"
    )
    asset_processing_check_retries: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Asset processing checks before giving up"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Runtime environment"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    @field_validator("external_source_headers", mode="before")
    @classmethod
    def parse_headers(cls, value):
        # Empty env var means no headers
        if value in (None, ""):
            return {}
        if isinstance(value, str):
            return json.loads(value)
        return value

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def connection(self) -> ContentfulConnection:
        """Credentials for the target space."""
        return ContentfulConnection(
            access_token=self.contentful_access_token,
            space_id=self.contentful_space_id,
            environment_id=self.contentful_environment_id or "master",
        )

    @property
    def source(self) -> ExternalSource:
        """
        Selected external source.

        Raises:
            SourceConfigurationError: If both or neither source is configured
        """
        return ExternalSource.create(
            url=self.external_source_url,
            local_file_path=self.external_source,
            headers=self.external_source_headers,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Importer settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
