"""
Result reporter service.

Summarizes settled results and pulls diagnostic detail out of failures.
Contentful errors carry a JSON payload as their message; anything else is
reported as its raw text.
"""

import json
from typing import Any, Optional, Sequence
import structlog

from models.records import SettledResult
from models.report import FailedImport, ImportReport

logger = structlog.get_logger(__name__)

NO_ERRORS_MARKER = "No errors found"


def parse_error_payload(reason: Any) -> Optional[dict[str, Any]]:
    """
    Decode the JSON payload carried in an exception's message.

    Returns:
        Payload dict, or None if the message is not a JSON object
    """
    if reason is None:
        return None

    message = getattr(reason, "message", None)
    if not isinstance(message, str):
        message = str(reason)

    try:
        payload = json.loads(message)
    except (TypeError, ValueError):
        return None

    return payload if isinstance(payload, dict) else None


def extract_failure_detail(index: int, reason: Any) -> FailedImport:
    """
    Build the FailedImport for a rejected record.

    Args:
        index: Record position in the batch
        reason: Exception the record failed with

    Returns:
        FailedImport with status/message/details/request URL when the
        payload is structured, or the raw error text otherwise
    """
    payload = parse_error_payload(reason)

    if payload is None:
        return FailedImport(
            record_index=index,
            raw_error=f"{type(reason).__name__}: {reason}" if reason is not None else "unknown error",
        )

    request = payload.get("request")
    status = payload.get("status")
    return FailedImport(
        record_index=index,
        error_status=status if isinstance(status, int) else None,
        error_message=payload.get("statusText"),
        message=payload.get("message"),
        details=payload.get("details"),
        payload_sent=request.get("url") if isinstance(request, dict) else None,
    )


def build_report(results: Sequence[SettledResult], *, log=None) -> ImportReport:
    """
    Count outcomes, extract failure details and log the summary.

    Args:
        results: Settled results from the batch runner
        log: Run logger

    Returns:
        ImportReport
    """
    log = log or logger

    failures = [
        extract_failure_detail(result.index, result.reason)
        for result in results
        if not result.ok
    ]

    report = ImportReport(
        total=len(results),
        succeeded=len(results) - len(failures),
        failed=len(failures),
        failures=failures,
    )

    if failures:
        log.info(
            "import_job_completed",
            summary=report.summary_line,
            total=report.total,
            rejected_imports=[failure.to_log() for failure in failures]
        )
    else:
        log.info(
            "import_job_completed",
            summary=report.summary_line,
            total=report.total,
            result=NO_ERRORS_MARKER
        )

    return report
