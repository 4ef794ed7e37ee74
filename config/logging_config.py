"""
Structured logging setup.

configure_logging() is called once by the entry point. Each run then gets
its own bound logger from get_run_logger(), which is passed explicitly to
every component taking part in that run.
"""

import logging
import sys
import uuid
from typing import Optional
import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        log_level: Minimum level to emit
        json_logs: Render JSON lines instead of the console renderer
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_logs
                else structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_run_logger(run_id: Optional[str] = None, **context):
    """
    Build the logger for one import run.

    Args:
        run_id: Run identifier (generated when omitted)
        **context: Extra context bound to every event of the run

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger("contentful_importer").bind(
        run_id=run_id or uuid.uuid4().hex[:12],
        **context
    )
