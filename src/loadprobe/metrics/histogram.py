"""HDR histogram for request latency percentiles.

Wraps ``hdrh.histogram.HdrHistogram``, which only stores integers, and
exposes a millisecond API. Values are kept internally as microseconds.
"""

from __future__ import annotations

from hdrh.histogram import HdrHistogram  # type: ignore[import-untyped]

# 1 microsecond up to 5 minutes, comfortably above the request timeout.
_LOWEST_TRACKABLE_US = 1
_HIGHEST_TRACKABLE_US = 300_000_000
_SIGNIFICANT_DIGITS = 3


class LatencyHistogram:
    """Latency distribution of all requests in a run.

    Recording clamps to the trackable range instead of rejecting values,
    so a failure that returned instantly (0 ms) is still counted.
    """

    def __init__(self) -> None:
        """Initialize an empty histogram."""
        self._histogram: HdrHistogram = HdrHistogram(  # type: ignore[no-any-unimported]
            _LOWEST_TRACKABLE_US, _HIGHEST_TRACKABLE_US, _SIGNIFICANT_DIGITS
        )

    @property
    def count(self) -> int:
        """Number of recorded values."""
        return int(self._histogram.total_count)

    def record(self, latency_ms: float) -> None:
        """Record one latency value in milliseconds."""
        value_us = int(latency_ms * 1000)
        value_us = max(_LOWEST_TRACKABLE_US, min(value_us, _HIGHEST_TRACKABLE_US))
        self._histogram.record_value(value_us)

    def percentile(self, percentile: float) -> float:
        """Latency in milliseconds at ``percentile`` (0-100), 0.0 if empty."""
        if self.count == 0:
            return 0.0
        return self._histogram.get_value_at_percentile(percentile) / 1000.0

    def min(self) -> float:
        """Smallest recorded latency in milliseconds, 0.0 if empty.

        Values come back at bucket precision and never below the 1 µs floor
        that ``record`` clamps to.
        """
        if self.count == 0:
            return 0.0
        return self._histogram.get_min_value() / 1000.0

    def max(self) -> float:
        """Largest recorded latency in milliseconds, 0.0 if empty.

        Anything above 300 s was recorded as 300 s.
        """
        if self.count == 0:
            return 0.0
        return self._histogram.get_max_value() / 1000.0
