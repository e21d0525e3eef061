"""Top-level load test orchestrator."""

from __future__ import annotations

import asyncio
import contextlib
import sys
import time
from typing import TYPE_CHECKING

from loadprobe._internal.config import DEFAULT_REQUEST_TIMEOUT
from loadprobe._internal.errors import ConfigError, EngineError
from loadprobe._internal.logging import get_logger, setup_logging
from loadprobe.engine.distributor import WorkDistributor
from loadprobe.engine.executor import HttpExecutor
from loadprobe.engine.worker import run_worker
from loadprobe.metrics.aggregator import ReportAggregator

if TYPE_CHECKING:
    from loadprobe.engine.executor import RequestOutcome
    from loadprobe.engine.protocol import RequestExecutor
    from loadprobe.metrics.models import Report

logger = get_logger("engine.runner")


def _install_uvloop() -> None:
    """Install uvloop as the default event loop policy if available.

    Falls back to the default asyncio event loop on Windows or if uvloop
    is not installed.
    """
    if sys.platform == "win32":
        return

    try:
        import uvloop

        uvloop.install()
        logger.debug("uvloop installed as event loop policy")
    except ImportError:
        logger.debug("uvloop not available, using default asyncio event loop")


class LoadTestRunner:
    """Issues a fixed number of GET requests through a bounded worker pool.

    One run wires together a pre-filled ``WorkDistributor``, ``concurrency``
    worker tasks sharing a single executor, and a ``ReportAggregator``
    draining the results queue while the workers run. The results queue is
    closed only after every worker has returned, so no outcome is lost.

    Attributes:
        url: Target URL.
        total_requests: Number of requests to issue.
        concurrency: Effective number of workers, at most ``total_requests``.
        request_timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        total_requests: int,
        concurrency: int,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        executor: RequestExecutor | None = None,
        log_level: int = 20,
    ) -> None:
        """Initialize the runner.

        Args:
            url: Target URL.
            total_requests: Number of requests to issue.
            concurrency: Requested number of concurrent workers. Values
                above ``total_requests`` are reduced to it.
            request_timeout: Per-request timeout for the default executor.
            executor: Executor shared by all workers. When omitted an
                ``HttpExecutor`` is opened for the run and closed after it.
            log_level: Logging level used by ``run()``.

        Raises:
            ConfigError: If the URL is empty, ``total_requests`` is negative
                or ``concurrency`` is not positive.
        """
        if not url.strip():
            msg = "URL is required"
            raise ConfigError(msg)
        if total_requests < 0:
            msg = f"total_requests must be >= 0, got: {total_requests}"
            raise ConfigError(msg)
        if concurrency < 1:
            msg = f"concurrency must be >= 1, got: {concurrency}"
            raise ConfigError(msg)

        self.url = url
        self.total_requests = total_requests
        self.concurrency = min(concurrency, total_requests)
        self.request_timeout = request_timeout
        self._executor = executor
        self._log_level = log_level

    def run(self) -> Report:
        """Execute the load test and block until it completes.

        Returns:
            The final Report.

        Raises:
            EngineError: If the orchestration itself fails.
        """
        _install_uvloop()
        setup_logging(level=self._log_level)
        return asyncio.run(self.run_async())

    async def run_async(self) -> Report:
        """Execute the load test on the running event loop.

        Returns:
            The final Report.

        Raises:
            EngineError: If the orchestration itself fails.
        """
        logger.info(
            "Starting load test: url=%s, requests=%d, concurrency=%d",
            self.url,
            self.total_requests,
            self.concurrency,
        )

        async with contextlib.AsyncExitStack() as stack:
            execute = self._executor
            if execute is None:
                execute = await stack.enter_async_context(
                    HttpExecutor(
                        request_timeout=self.request_timeout,
                        pool_limit=self.concurrency,
                    )
                )
            report = await self._execute(execute)

        logger.info(
            "Load test completed: duration=%.2fs, total_requests=%d, "
            "success=%d, errors=%d, avg=%.1fms, rps=%.1f",
            report.total_time_seconds,
            report.total_requests,
            report.success_requests,
            report.error_count,
            report.average_response_ms,
            report.requests_per_second,
        )
        return report

    async def _execute(self, execute: RequestExecutor) -> Report:
        start_time = time.monotonic()

        distributor = WorkDistributor(self.total_requests)
        results: asyncio.Queue[RequestOutcome | None] = asyncio.Queue(
            maxsize=max(self.concurrency, 1)
        )
        aggregator = ReportAggregator()

        # A fault in any worker or in the aggregator cancels all other tasks.
        try:
            async with asyncio.TaskGroup() as group:
                group.create_task(aggregator.consume(results), name="loadprobe-aggregator")
                group.create_task(
                    self._run_workers(distributor, execute, results),
                    name="loadprobe-workers",
                )
        except ExceptionGroup as exc:
            logger.exception("Load test failed")
            raise EngineError("Load test failed") from exc

        total_time = time.monotonic() - start_time

        if aggregator.total_requests != self.total_requests:
            msg = (
                f"Expected {self.total_requests} outcomes, "
                f"aggregated {aggregator.total_requests}"
            )
            raise EngineError(msg)

        return aggregator.build_report(total_time)

    async def _run_workers(
        self,
        distributor: WorkDistributor,
        execute: RequestExecutor,
        results: asyncio.Queue[RequestOutcome | None],
    ) -> None:
        """Run every worker to completion, then close the results queue."""
        async with asyncio.TaskGroup() as workers:
            for i in range(self.concurrency):
                workers.create_task(
                    run_worker(i, self.url, distributor, execute, results),
                    name=f"loadprobe-worker-{i}",
                )

        # Close the results queue only once no worker can produce more.
        await results.put(None)


def run_load_test(
    url: str,
    total_requests: int,
    concurrency: int,
    **kwargs: object,
) -> Report:
    """Run a load test and return its report.

    Convenience wrapper around ``LoadTestRunner(...).run()``; keyword
    arguments are forwarded to the runner.
    """
    runner = LoadTestRunner(url, total_requests, concurrency, **kwargs)  # type: ignore[arg-type]
    return runner.run()
