"""
Batch runner service.

Runs one worker call per item on a bounded thread pool and waits for every
call to settle. A failing item never stops the others.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Optional, Sequence
import structlog

from models.records import SettledResult

logger = structlog.get_logger(__name__)


def run_batch(
    items: Sequence[Any],
    worker: Callable[[Any], Any],
    *,
    max_workers: int = 5,
    log=None,
) -> list[SettledResult]:
    """
    Run worker(item) for every item with at most max_workers in flight.

    Args:
        items: Work items (normalized records)
        worker: Blocking per-item operation
        max_workers: Pool width
        log: Run logger

    Returns:
        Exactly one SettledResult per item, in input order
    """
    log = log or logger
    width = max(1, int(max_workers))
    results: list[Optional[SettledResult]] = [None] * len(items)

    log.info("importing_data", records=len(items), max_workers=width)

    if not items:
        return []

    with ThreadPoolExecutor(max_workers=width, thread_name_prefix="import") as executor:
        futures = {
            executor.submit(worker, item): index
            for index, item in enumerate(items)
        }

        for future in as_completed(futures):
            index = futures[future]
            try:
                results[index] = SettledResult.fulfilled(index, future.result())
            except Exception as e:
                log.warning(
                    "record_import_failed",
                    record_index=index,
                    error_type=type(e).__name__,
                    error=str(e)
                )
                results[index] = SettledResult.rejected(index, e)

    return results
