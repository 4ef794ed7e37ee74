"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.mapping import (
    FieldMapping,
    AssetLabels,
    MappingConfig,
    RICH_TEXT_TYPE,
)
from models.source import (
    ExternalSource,
    ContentfulConnection,
)
from models.records import (
    NormalizedField,
    NormalizedRecord,
    ImportedRecord,
    SettledResult,
)
from models.report import (
    FailedImport,
    ImportReport,
    EXIT_OK,
    EXIT_RECORD_FAILURES,
    EXIT_ABORTED,
)

__all__ = [
    "BaseSchema",
    "FieldMapping",
    "AssetLabels",
    "MappingConfig",
    "RICH_TEXT_TYPE",
    "ExternalSource",
    "ContentfulConnection",
    "NormalizedField",
    "NormalizedRecord",
    "ImportedRecord",
    "SettledResult",
    "FailedImport",
    "ImportReport",
    "EXIT_OK",
    "EXIT_RECORD_FAILURES",
    "EXIT_ABORTED",
]
