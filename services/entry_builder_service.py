"""
Entry/asset builder service.

For each normalized record:
    1. Create the entry with every non-link field, localized
    2. Create the asset pointing at the record's upload URL
    3. Process the asset for all locales, then publish it
    4. Link the published asset into the entry's link field
    5. Update the entry, then publish it

The whole chain runs as one blocking call (import_record); a failure at
any step is the record's failure. An entry created before a later step
fails stays in Contentful (no rollback).
"""

from typing import Any
import structlog

from integrations.contentful import ContentfulEnvironment, ContentfulEntry
from models.mapping import MappingConfig, RICH_TEXT_TYPE
from models.records import ImportedRecord, NormalizedRecord
from exceptions import AssetSourceMissingError
from utils.asset_files import asset_file_name
from utils.rich_text import build_rich_text_document, stringify_value

logger = structlog.get_logger(__name__)


def asset_link(asset_id: str) -> dict[str, Any]:
    """Link reference pointing an entry field at an asset."""
    return {
        "sys": {
            "type": "Link",
            "linkType": "Asset",
            "id": str(asset_id),
        }
    }


class EntryAssetBuilder:
    """
    Builds payloads for, and drives, one record's entry + asset import.

    Instances hold no per-record state and can be shared by every worker
    thread of a run.
    """

    def __init__(
        self,
        environment: ContentfulEnvironment,
        mapping: MappingConfig,
        content_type_id: str,
        locale_code: str,
        *,
        log=None,
    ):
        self.environment = environment
        self.mapping = mapping
        self.content_type_id = content_type_id
        self.locale_code = locale_code
        self.log = log or logger

    # ===================
    # PAYLOADS
    # ===================

    def build_entry_fields(self, record: NormalizedRecord) -> dict[str, Any]:
        """
        Localized fields for the create-entry call.

        Skips the asset link field. RichText fields are wrapped in a
        document; everything else is written as its string form.

        Args:
            record: Normalized record

        Returns:
            {field_id: {locale_code: value}}
        """
        fields: dict[str, Any] = {}

        for field_id, field in record.fields.items():
            if field_id == self.mapping.link_field:
                continue

            value = stringify_value(field.value)
            if field.type == RICH_TEXT_TYPE:
                value = build_rich_text_document(value)

            fields[field_id] = {self.locale_code: value}

        return fields

    def upload_url(self, record: NormalizedRecord) -> str:
        """
        Binary source URL for the record's asset.

        Raises:
            AssetSourceMissingError: If the upload field is empty
        """
        upload_field = self.mapping.asset_labels.upload
        url = record.value_of(upload_field)
        if url in (None, ""):
            raise AssetSourceMissingError(record.source_index, upload_field)
        return str(url)

    def build_asset_fields(self, record: NormalizedRecord, entry_id: str) -> dict[str, Any]:
        """
        Localized fields for the create-asset call.

        The filename is derived from the owning entry's ID and the upload
        URL's type. The field named by the 'title' asset label, when it has
        a value, becomes the asset description.

        Args:
            record: Normalized record the entry was created from
            entry_id: ID of the created entry

        Returns:
            {"title": {...}, "file": {...}} (plus "description" when available)
        """
        upload = self.upload_url(record)
        file_name, content_type = asset_file_name(entry_id, upload)

        fields: dict[str, Any] = {
            "title": {self.locale_code: file_name},
            "file": {
                self.locale_code: {
                    "contentType": content_type,
                    "fileName": file_name,
                    "upload": upload,
                }
            },
        }

        description = stringify_value(record.value_of(self.mapping.asset_labels.title))
        if description:
            fields["description"] = {self.locale_code: description}

        return fields

    def attach_asset_link(self, entry: ContentfulEntry, asset_id: str) -> ContentfulEntry:
        """
        Add the asset link to the entry's link field for this locale.

        An existing non-empty link list is appended to; anything else is
        replaced by a single-link list. Other locales are left untouched.
        """
        link_field = self.mapping.link_field
        localized = dict(entry.fields.get(link_field) or {})
        existing = localized.get(self.locale_code)

        if isinstance(existing, list) and existing:
            localized[self.locale_code] = [*existing, asset_link(asset_id)]
        else:
            localized[self.locale_code] = [asset_link(asset_id)]

        entry.fields[link_field] = localized
        return entry

    # ===================
    # IMPORT CHAIN
    # ===================

    def import_record(self, record: NormalizedRecord) -> ImportedRecord:
        """
        Run the full create → asset → link → publish chain for one record.

        Args:
            record: Normalized record

        Returns:
            ImportedRecord with the entry and asset IDs

        Raises:
            AssetSourceMissingError: If the record has no upload URL
            ContentfulApiError / ContentfulRequestError: If any call fails
            AssetProcessingTimeoutError: If asset processing never finishes
        """
        log = self.log.bind(record_index=record.source_index)

        # Fail before creating anything when the asset cannot be built
        self.upload_url(record)

        entry = self.environment.create_entry(
            self.content_type_id,
            self.build_entry_fields(record)
        )
        log.debug("entry_created", entry_id=entry.id)

        asset = self.environment.create_asset(self.build_asset_fields(record, entry.id))
        log.debug("asset_created", entry_id=entry.id, asset_id=asset.id)

        asset = asset.process_for_all_locales()
        asset = asset.publish()
        log.debug("asset_published", asset_id=asset.id)

        self.attach_asset_link(entry, asset.id)
        entry = entry.update()
        entry = entry.publish()
        log.info("entry_imported", entry_id=entry.id, asset_id=asset.id)

        return ImportedRecord(
            record_index=record.source_index,
            entry_id=entry.id,
            asset_id=asset.id,
        )

