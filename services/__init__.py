"""
Import services.

Each service handles one step of the import run.
"""

from services.connection_service import establish_connection
from services.resource_validator_service import validate_and_resolve_locale
from services.source_reader_service import read_external_records
from services.field_mapper_service import map_records
from services.entry_builder_service import EntryAssetBuilder
from services.batch_runner_service import run_batch
from services.result_reporter_service import build_report, extract_failure_detail
from services.import_service import ContentfulImportService

__all__ = [
    "establish_connection",
    "validate_and_resolve_locale",
    "read_external_records",
    "map_records",
    "EntryAssetBuilder",
    "run_batch",
    "build_report",
    "extract_failure_detail",
    "ContentfulImportService",
]
