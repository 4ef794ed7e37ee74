"""
Field mapping models.

A mapping is hand-authored per run. Its dictionary form mirrors what
operators write in the mapping JSON file:

    {
        "title": {"type": "Symbol", "externalKey": "id"},
        "postBody": {"type": "RichText", "externalKey": "text"},
        "image": {"type": "Link", "externalKey": "image"},
        "assetLabels": {"title": "title", "upload": "image", "contentType": "image"}
    }

Every key except the asset label sub-mapping is a target field identifier
of the Contentful content type.
"""

from typing import Any
from pydantic import ConfigDict, Field, model_validator

from models.base import BaseSchema

ASSET_LABEL_KEYS = ("assetLabels", "assetsKeysToMatch")

RICH_TEXT_TYPE = "RichText"


class FieldMapping(BaseSchema):
    """Where a target field reads its value from, and its declared type."""

    external_key: str = Field(..., alias="externalKey", min_length=1, description="Key in the raw record")
    type: str = Field(..., min_length=1, description="Contentful field type (Symbol, Text, RichText, ...)")

    @property
    def is_rich_text(self) -> bool:
        return self.type == RICH_TEXT_TYPE


class AssetLabels(BaseSchema):
    """
    Target fields used to build the asset attached to each entry.

    - title: field whose value becomes the asset description
    - upload: field holding the binary source URL
    - content_type: entry field that receives the asset link
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    upload: str = Field(..., min_length=1)
    content_type: str = Field(..., alias="contentType", min_length=1)


class MappingConfig(BaseSchema):
    """Target field identifier -> FieldMapping, plus the asset labels."""

    fields: dict[str, FieldMapping] = Field(default_factory=dict)
    asset_labels: AssetLabels = Field(..., alias="assetLabels")

    @model_validator(mode="before")
    @classmethod
    def split_asset_labels(cls, data: Any) -> Any:
        """Accept the flat hand-authored shape as well as the explicit one."""
        if not isinstance(data, dict) or "fields" in data:
            return data

        labels = None
        fields = {}
        for key, value in data.items():
            if key in ASSET_LABEL_KEYS:
                labels = value
            else:
                fields[key] = value

        return {"fields": fields, "assetLabels": labels}

    @property
    def link_field(self) -> str:
        """Entry field that holds the asset link (excluded from create payloads)."""
        return self.asset_labels.content_type

    def to_dict(self) -> dict[str, Any]:
        """Back to the flat hand-authored shape."""
        flat: dict[str, Any] = {
            key: mapping.model_dump(by_alias=True)
            for key, mapping in self.fields.items()
        }
        flat["assetLabels"] = self.asset_labels.model_dump(by_alias=True)
        return flat
