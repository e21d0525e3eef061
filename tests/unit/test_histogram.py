"""Tests for LatencyHistogram."""

from __future__ import annotations

from loadprobe.metrics.histogram import LatencyHistogram


class TestLatencyHistogram:
    def test_record_and_percentile(self):
        h = LatencyHistogram()
        # Record 100 values from 1.0 to 100.0 ms
        for i in range(1, 101):
            h.record(float(i))

        assert 49.0 <= h.percentile(50.0) <= 51.0
        assert 98.0 <= h.percentile(99.0) <= 101.0
        assert h.count == 100

    def test_empty_histogram_returns_zeros(self):
        h = LatencyHistogram()
        assert h.count == 0
        assert h.percentile(50.0) == 0.0
        assert h.min() == 0.0
        assert h.max() == 0.0

    def test_min_max(self):
        h = LatencyHistogram()
        for value in (5.0, 15.0, 25.0):
            h.record(value)

        assert 4.9 <= h.min() <= 5.1
        assert 24.9 <= h.max() <= 25.1

    def test_zero_latency_is_counted(self):
        """Instant failures are clamped into range, not dropped."""
        h = LatencyHistogram()
        h.record(0.0)
        assert h.count == 1
        assert h.min() <= 0.01

    def test_huge_latency_is_clamped(self):
        h = LatencyHistogram()
        h.record(10_000_000.0)
        assert h.count == 1
        assert h.max() <= 300_500.0
