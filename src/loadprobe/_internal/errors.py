"""Custom exception hierarchy for loadprobe."""

from __future__ import annotations


class LoadProbeError(Exception):
    """Base exception for all loadprobe errors.

    Per-request failures are never raised as exceptions; they are captured
    as data on a ``RequestOutcome``. Only problems that prevent a run from
    starting or completing derive from this class.
    """


class ConfigError(LoadProbeError):
    """Raised when configuration or run options are invalid.

    Examples:
        - The target URL is empty.
        - The request count or concurrency level is not positive.
        - An environment variable has an invalid value.
    """


class EngineError(LoadProbeError):
    """Raised when the load test orchestration fails unexpectedly."""
