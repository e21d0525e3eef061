"""Report dataclass produced at the end of a load test run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from loadprobe._internal.types import ErrorCounts, StatusCounts

SUCCESS_STATUS = 200


@dataclass(frozen=True)
class Report:
    """Aggregate statistics over every request outcome of one run.

    Failed requests (no HTTP response) are counted in ``error_count`` only.
    Every HTTP response, whatever its status, is counted in
    ``status_codes``; only status 200 counts as a success. Hence::

        success_requests + error_count
            + sum(n for code, n in status_codes.items() if code != 200)
        == total_requests

    Attributes:
        total_time_seconds: Wall-clock duration of the whole run, from
            filling the work queue to consuming the last outcome.
        total_requests: Number of outcomes observed.
        success_requests: Outcomes with status 200.
        error_count: Outcomes that failed without a response.
        status_codes: Occurrence count per HTTP status code.
        average_response_ms: Mean latency over all outcomes, failures
            included. 0.0 when no outcome was observed.
        latency_min_ms: Fastest observed request.
        latency_max_ms: Slowest observed request.
        latency_p50_ms: Median latency.
        latency_p90_ms: 90th percentile latency.
        latency_p95_ms: 95th percentile latency.
        latency_p99_ms: 99th percentile latency.
        errors_by_type: Failure count per exception type name.
    """

    total_time_seconds: float
    total_requests: int = 0
    success_requests: int = 0
    error_count: int = 0
    status_codes: StatusCounts = field(default_factory=dict)
    average_response_ms: float = 0.0
    latency_min_ms: float = 0.0
    latency_max_ms: float = 0.0
    latency_p50_ms: float = 0.0
    latency_p90_ms: float = 0.0
    latency_p95_ms: float = 0.0
    latency_p99_ms: float = 0.0
    errors_by_type: ErrorCounts = field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        """Fraction of requests answered with status 200 (0.0 to 1.0)."""
        if self.total_requests == 0:
            return 0.0
        return self.success_requests / self.total_requests

    @property
    def error_rate(self) -> float:
        """Fraction of requests that failed without a response (0.0 to 1.0)."""
        if self.total_requests == 0:
            return 0.0
        return self.error_count / self.total_requests

    @property
    def requests_per_second(self) -> float:
        """Overall throughput of the run."""
        if self.total_time_seconds <= 0:
            return 0.0
        return self.total_requests / self.total_time_seconds

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation.

        Status codes become string keys, as JSON object keys must be.
        """
        return {
            "total_time_seconds": self.total_time_seconds,
            "total_requests": self.total_requests,
            "success_requests": self.success_requests,
            "error_count": self.error_count,
            "status_codes": {str(code): n for code, n in sorted(self.status_codes.items())},
            "average_response_ms": self.average_response_ms,
            "latency_ms": {
                "min": self.latency_min_ms,
                "max": self.latency_max_ms,
                "p50": self.latency_p50_ms,
                "p90": self.latency_p90_ms,
                "p95": self.latency_p95_ms,
                "p99": self.latency_p99_ms,
            },
            "errors_by_type": dict(sorted(self.errors_by_type.items())),
            "success_rate": self.success_rate,
            "error_rate": self.error_rate,
            "requests_per_second": self.requests_per_second,
        }
