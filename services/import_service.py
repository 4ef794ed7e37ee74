"""
Contentful import service.

Orchestrates one import run:
    connect → validate locale/content type → read source → map fields
    → import every record on the worker pool → report

Failures before the batch starts abort the whole run. They are logged
with the attempted parameters and returned as an aborted ImportReport;
run() never raises for them.
"""

from typing import Any, Callable, Optional
import structlog

from config.settings import Settings
from integrations.contentful import ContentfulEnvironment
from models.mapping import MappingConfig
from models.report import ImportReport
from models.source import ContentfulConnection, ExternalSource
from exceptions import AppError
from services.connection_service import establish_connection
from services.resource_validator_service import validate_and_resolve_locale
from services.source_reader_service import read_external_records
from services.field_mapper_service import map_records
from services.entry_builder_service import EntryAssetBuilder
from services.batch_runner_service import run_batch
from services.result_reporter_service import build_report, parse_error_payload

logger = structlog.get_logger(__name__)

Connector = Callable[..., ContentfulEnvironment]


class ContentfulImportService:
    """
    One import run against one Contentful environment.

    The connector is injectable so tests can hand in an in-memory
    environment instead of talking to Contentful.
    """

    def __init__(
        self,
        settings: Settings,
        mapping: MappingConfig,
        *,
        source: Optional[ExternalSource] = None,
        connector: Optional[Connector] = None,
        log=None,
    ):
        self.settings = settings
        self.mapping = mapping
        self._source = source
        self.connector = connector or establish_connection
        self.log = log or logger

    @property
    def source(self) -> ExternalSource:
        if self._source is None:
            self._source = self.settings.source
        return self._source

    def _parameters(self) -> dict[str, Any]:
        """Attempted parameters, logged when the run aborts."""
        try:
            source = self.source.describe()
        except AppError:
            source = {
                "url": self.settings.external_source_url,
                "local_file_path": self.settings.external_source,
            }
        return {
            "external_source": source,
            "content_types": self.mapping.to_dict(),
            "content_type_id": self.settings.contentful_content_type_id,
            "locale_id": self.settings.contentful_locale_id,
        }

    def _connect(self) -> ContentfulEnvironment:
        settings = self.settings
        credentials: ContentfulConnection = settings.connection
        return self.connector(
            credentials,
            base_url=settings.contentful_api_url,
            timeout_s=settings.request_timeout_s,
            pool_size=settings.import_max_workers,
            processing_check_wait_s=settings.asset_processing_check_wait_s,
            processing_check_retries=settings.asset_processing_check_retries,
            log=self.log,
        )

    def _abort(self, error: Exception) -> ImportReport:
        parameters = self._parameters()
        payload = parse_error_payload(error)

        if payload and payload.get("details") is not None:
            error_info = {
                "error_status": payload.get("status"),
                "error_message": payload.get("message"),
                "error_details": payload.get("details"),
                "request": payload.get("request"),
            }
        elif isinstance(error, AppError):
            error_info = error.to_dict()["error"]
        else:
            error_info = {"error_type": type(error).__name__, "error": str(error)}

        self.log.error(
            "import_aborted",
            parameters=parameters,
            **error_info
        )
        return ImportReport.abort(error_info)

    def run(self, verify_only: bool = False) -> ImportReport:
        """
        Execute the import.

        Args:
            verify_only: Stop after connection and resource validation

        Returns:
            ImportReport (aborted=True if the run stopped before the batch)
        """
        settings = self.settings

        try:
            source = self.source
            environment = self._connect()
            locale_code = validate_and_resolve_locale(
                environment,
                settings.contentful_content_type_id,
                settings.contentful_locale_id,
                log=self.log,
            )

            if verify_only:
                self.log.info("verification_completed", locale_code=locale_code)
                return ImportReport()

            raw_records = read_external_records(
                source,
                config_dir=settings.source_config_dir,
                timeout_s=settings.request_timeout_s,
                log=self.log,
            )
            records = map_records(
                raw_records,
                self.mapping,
                limit=settings.import_record_limit,
                log=self.log,
            )
        except Exception as e:
            return self._abort(e)

        builder = EntryAssetBuilder(
            environment,
            self.mapping,
            settings.contentful_content_type_id,
            locale_code,
            log=self.log,
        )
        results = run_batch(
            records,
            builder.import_record,
            max_workers=settings.import_max_workers,
            log=self.log,
        )
        return build_report(results, log=self.log)
