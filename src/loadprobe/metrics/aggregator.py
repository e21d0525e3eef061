"""Fold request outcomes into a run report.

The ``ReportAggregator`` is the single consumer of the results queue. It
owns its counters exclusively: workers only ever hand outcomes over the
queue, so no lock guards the accumulated state.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from loadprobe._internal.logging import get_logger
from loadprobe.metrics.histogram import LatencyHistogram
from loadprobe.metrics.models import SUCCESS_STATUS, Report

if TYPE_CHECKING:
    import asyncio

    from loadprobe.engine.executor import RequestOutcome

logger = get_logger("metrics.aggregator")


class ReportAggregator:
    """Running accumulator for one load test run."""

    def __init__(self) -> None:
        """Initialize empty counters."""
        self.total_requests = 0
        self.success_requests = 0
        self.error_count = 0
        self._status_codes: dict[int, int] = defaultdict(int)
        self._errors_by_type: dict[str, int] = defaultdict(int)
        self._total_duration_ms = 0.0
        self._histogram = LatencyHistogram()

    def record(self, outcome: RequestOutcome) -> None:
        """Fold a single outcome into the counters.

        Args:
            outcome: Outcome produced by a worker.
        """
        self.total_requests += 1
        self._total_duration_ms += outcome.duration_ms
        self._histogram.record(outcome.duration_ms)

        code = outcome.status_code
        if outcome.failed or code is None:
            self.error_count += 1
            self._errors_by_type[outcome.error_type or "Unknown"] += 1
            return

        self._status_codes[code] += 1
        if code == SUCCESS_STATUS:
            self.success_requests += 1

    async def consume(self, results: asyncio.Queue[RequestOutcome | None]) -> int:
        """Drain ``results`` in arrival order until the close marker.

        The runner puts ``None`` on the queue only after every worker has
        returned, so reaching it means no outcome is still in flight.

        Args:
            results: Queue fed by the workers.

        Returns:
            Number of outcomes consumed.
        """
        consumed = 0
        while True:
            outcome = await results.get()
            if outcome is None:
                break
            self.record(outcome)
            consumed += 1

        logger.debug("Results queue closed after %d outcomes", consumed)
        return consumed

    def build_report(self, total_time_seconds: float) -> Report:
        """Freeze the counters into a Report.

        Args:
            total_time_seconds: Wall-clock duration of the run.

        Returns:
            The final report.
        """
        average = 0.0
        if self.total_requests > 0:
            average = self._total_duration_ms / self.total_requests

        hist = self._histogram
        return Report(
            total_time_seconds=total_time_seconds,
            total_requests=self.total_requests,
            success_requests=self.success_requests,
            error_count=self.error_count,
            status_codes=dict(self._status_codes),
            average_response_ms=average,
            latency_min_ms=hist.min(),
            latency_max_ms=hist.max(),
            latency_p50_ms=hist.percentile(50.0),
            latency_p90_ms=hist.percentile(90.0),
            latency_p95_ms=hist.percentile(95.0),
            latency_p99_ms=hist.percentile(99.0),
            errors_by_type=dict(self._errors_by_type),
        )
