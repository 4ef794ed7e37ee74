"""
Field mapper service.

Turns raw external records into NormalizedRecords keyed by target field
identifiers. No validation happens here: a missing external key maps to
None and is still forwarded.
"""

from typing import Any, Iterable, Optional
import structlog

from models.mapping import MappingConfig
from models.records import NormalizedField, NormalizedRecord

logger = structlog.get_logger(__name__)

_MISSING = object()


def lookup_external_value(record: dict[str, Any], external_key: str) -> Any:
    """
    Value at external_key in record.

    The literal key wins. Otherwise a dotted key ("author.name") is followed
    through nested dictionaries. Missing keys give None.
    """
    if not isinstance(record, dict):
        return None

    if external_key in record:
        return record[external_key]

    if "." not in external_key:
        return None

    current: Any = record
    for part in external_key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part, _MISSING)
        if current is _MISSING:
            return None
    return current


def map_record(record: dict[str, Any], mapping: MappingConfig, source_index: int) -> NormalizedRecord:
    """Map one raw record; every mapped target field is present in the result."""
    return NormalizedRecord(
        source_index=source_index,
        fields={
            target_field: NormalizedField(
                value=lookup_external_value(record, field_mapping.external_key),
                type=field_mapping.type,
            )
            for target_field, field_mapping in mapping.fields.items()
        },
    )


def map_records(
    raw_records: Iterable[dict[str, Any]],
    mapping: MappingConfig,
    *,
    limit: Optional[int] = None,
    log=None,
) -> list[NormalizedRecord]:
    """
    Map raw records to normalized records, preserving source order.

    Args:
        raw_records: Records as read from the source
        mapping: Target field → external key configuration
        limit: Only map the first N records (all when None)
        log: Run logger

    Returns:
        One NormalizedRecord per mapped raw record
    """
    log = log or logger
    records = list(raw_records)
    if limit is not None:
        records = records[:limit]

    log.info(
        "matching_external_fields",
        records=len(records),
        target_fields=list(mapping.fields)
    )

    return [
        map_record(record, mapping, index)
        for index, record in enumerate(records)
    ]
