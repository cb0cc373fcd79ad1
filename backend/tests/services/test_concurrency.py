# backend/tests/services/test_concurrency.py
"""
Tests for run_parallel, the fan-out helper behind every parallel stage.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from currency_archive.services.concurrency import run_parallel
from currency_archive.services.exceptions import AnalyticsTimeoutError
from currency_archive.utils.context import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


class TestRunParallel:

    def test_results_in_input_order(self, executor):
        def slow_square(x):
            # later items finish first
            time.sleep(0.01 * (5 - x))
            return x * x

        assert run_parallel(executor, slow_square, range(5)) == [0, 1, 4, 9, 16]

    def test_empty_input(self, executor):
        assert run_parallel(executor, str, []) == []

    def test_task_exception_propagates(self, executor):
        def fail_on_three(x):
            if x == 3:
                raise ValueError("bad item")
            return x

        with pytest.raises(ValueError, match="bad item"):
            run_parallel(executor, fail_on_three, range(5))

    def test_timeout(self):
        release = threading.Event()
        pool = ThreadPoolExecutor(max_workers=1)
        try:
            with pytest.raises(AnalyticsTimeoutError) as exc_info:
                run_parallel(pool, release.wait, [5, 5], timeout=0.05, stage="blocked")

            assert exc_info.value.stage == "blocked"
        finally:
            release.set()
            pool.shutdown(wait=True, cancel_futures=True)

    def test_correlation_id_reaches_workers(self, executor):
        set_correlation_id("req-42")
        try:
            seen = run_parallel(executor, lambda _: get_correlation_id(), range(3))
        finally:
            clear_correlation_id()

        assert seen == ["req-42", "req-42", "req-42"]
