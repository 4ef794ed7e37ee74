"""
Source and connection models.

ExternalSource selects where raw records come from.
ContentfulConnection carries the credentials for the target space.
"""

from typing import Optional
from pydantic import Field, model_validator

from models.base import BaseSchema
from exceptions import SourceConfigurationError


class ExternalSource(BaseSchema):
    """
    Where to read raw records from.

    Exactly one of url / local_file_path must be set. Construct through
    ExternalSource.create() to get a SourceConfigurationError instead of a
    pydantic ValidationError when that rule is broken.
    """

    url: Optional[str] = Field(None, description="REST endpoint returning {'data': [...]}")
    headers: dict[str, str] = Field(default_factory=dict, description="Headers sent with the GET")
    local_file_path: Optional[str] = Field(
        None,
        description="JSON file relative to the config directory"
    )

    @model_validator(mode="after")
    def exactly_one_source(self) -> "ExternalSource":
        if bool(self.url) == bool(self.local_file_path):
            raise ValueError("exactly one of url or local_file_path must be set")
        return self

    @classmethod
    def create(
        cls,
        url: Optional[str] = None,
        local_file_path: Optional[str] = None,
        headers: Optional[dict[str, str]] = None
    ) -> "ExternalSource":
        if bool(url) == bool(local_file_path):
            raise SourceConfigurationError(
                "Configure exactly one external source (URL or local file)",
                details={"url": url, "local_file_path": local_file_path}
            )
        return cls(url=url or None, local_file_path=local_file_path or None, headers=headers or {})

    @property
    def mode(self) -> str:
        return "url" if self.url else "file"

    def describe(self) -> dict:
        """Loggable description (header values omitted)."""
        return {
            "mode": self.mode,
            "url": self.url,
            "local_file_path": self.local_file_path,
            "header_names": sorted(self.headers),
        }


class ContentfulConnection(BaseSchema):
    """Credentials for the target Contentful space."""

    access_token: str = Field(..., min_length=1, repr=False)
    space_id: str = Field(..., min_length=1)
    environment_id: str = Field("master", min_length=1)
    headers: dict[str, str] = Field(default_factory=dict, description="Extra headers for every API call")
