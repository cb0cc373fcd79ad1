# backend/currency_archive/services/concurrency.py
"""
Fan-out helper for the shared worker pool.

Every parallel stage in the services (per-date fetches, per-currency
metrics, per-window statistics) goes through ``run_parallel``:

    results = run_parallel(executor, fn, items, timeout=30, stage="metrics")

- One task per item, submitted with the caller's context (correlation ID)
- Results come back in input order, regardless of completion order
- A task exception propagates to the caller unchanged
- If the stage does not finish within ``timeout`` seconds, pending tasks
  are cancelled and AnalyticsTimeoutError is raised

Stages never submit work from inside a pool task; a stage waits for all of
its tasks before the next stage starts.
"""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_EXCEPTION, Executor, wait
from typing import TypeVar

from currency_archive.services.exceptions import AnalyticsTimeoutError
from currency_archive.utils.context import submit_with_context

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def run_parallel(
        executor: Executor,
        fn: Callable[[T], R],
        items: Iterable[T],
        timeout: float | None = None,
        stage: str = "parallel",
) -> list[R]:
    """
    Apply ``fn`` to every item on ``executor`` and wait for all results.

    Args:
        executor: Shared pool
        fn: Single-argument task
        items: Task inputs
        timeout: Seconds to wait for the whole stage (None = no limit)
        stage: Name used in logs and in the timeout error

    Returns:
        ``[fn(item) for item in items]``, in input order

    Raises:
        AnalyticsTimeoutError: The stage did not finish in time
    """
    futures = [submit_with_context(executor, fn, item) for item in items]
    if not futures:
        return []

    done, not_done = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)

    # A failed task ends the stage early; cancel the rest and re-raise below
    failed = next((f for f in done if not f.cancelled() and f.exception() is not None), None)
    if failed is not None:
        for future in not_done:
            future.cancel()
        raise failed.exception()

    if not_done:
        cancelled = sum(1 for future in not_done if future.cancel())
        logger.warning(
            f"Stage '{stage}' timed out after {timeout}s: "
            f"{len(not_done)} of {len(futures)} tasks unfinished, {cancelled} cancelled"
        )
        raise AnalyticsTimeoutError(stage, timeout)

    return [future.result() for future in futures]
