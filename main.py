"""
Contentful Importer: command line entry point.

Usage:
    # Import from the file configured in EXTERNAL_SOURCE (relative to config/)
    python main.py

    # Import from an endpoint with a custom mapping, 10 workers
    python main.py --source-url https://api.example.com/posts \
        --mapping field_mapping.json --workers 10

    # Only check credentials, locale and content type
    python main.py --verify-only

Exit codes:
    0  every record imported (or verification passed)
    1  at least one record failed
    2  run aborted before the batch (configuration, connection, validation, source)
"""

import argparse
import sys
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError
import structlog

from config import Settings, configure_logging, get_run_logger, load_mapping
from exceptions import AppError
from models.report import EXIT_ABORTED
from services.import_service import ContentfulImportService

logger = structlog.get_logger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import external records into Contentful as entries with linked assets."
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--source-file", help="JSON file relative to the config directory")
    source.add_argument("--source-url", help="REST endpoint returning {'data': [...]}")
    parser.add_argument("--mapping", help="Field mapping JSON file relative to the config directory")
    parser.add_argument("--config-dir", help="Directory holding source and mapping files")
    parser.add_argument("--limit", type=int, help="Only import the first N records")
    parser.add_argument("--workers", type=int, help="Records imported concurrently")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument(
        "--verify-only",
        action="store_true",
        help="Check connection, locale and content type, then stop"
    )
    return parser.parse_args(argv)


def settings_overrides(args: argparse.Namespace) -> dict:
    """CLI flags that replace environment values."""
    overrides: dict = {}

    if args.source_file:
        overrides["external_source"] = args.source_file
        overrides["external_source_url"] = None
    if args.source_url:
        overrides["external_source_url"] = args.source_url
        overrides["external_source"] = None
    if args.mapping:
        overrides["field_mapping_file"] = args.mapping
    if args.config_dir:
        overrides["source_config_dir"] = args.config_dir
    if args.limit is not None:
        overrides["import_record_limit"] = args.limit
    if args.workers is not None:
        overrides["import_max_workers"] = args.workers
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()

    return overrides


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()

    try:
        settings = Settings(**settings_overrides(args))
    except PydanticValidationError as e:
        configure_logging((args.log_level or "INFO").upper())
        logger.error(
            "invalid_settings",
            errors=e.errors(include_url=False, include_input=False, include_context=False)
        )
        return EXIT_ABORTED

    configure_logging(settings.log_level, json_logs=settings.is_production)
    log = get_run_logger(
        space_id=settings.contentful_space_id,
        environment_id=settings.contentful_environment_id,
    )

    try:
        mapping = load_mapping(settings.field_mapping_file, settings.source_config_dir)
    except AppError as e:
        log.error("invalid_field_mapping", **e.to_dict()["error"])
        return EXIT_ABORTED

    log.info("import_started", verify_only=args.verify_only)
    report = ContentfulImportService(settings, mapping, log=log).run(verify_only=args.verify_only)
    return report.exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
