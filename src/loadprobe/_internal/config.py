"""Configuration loading and run option validation for loadprobe."""

from __future__ import annotations

import os
from dataclasses import dataclass

from loadprobe._internal.errors import ConfigError

DEFAULT_REQUEST_TIMEOUT = 30.0

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True)
class LoadProbeConfig:
    """Process-wide loadprobe configuration.

    Attributes:
        request_timeout: Total timeout for a single GET, in seconds.
        json_logs: Emit structured JSON log lines instead of text.
    """

    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    json_logs: bool = False


@dataclass(frozen=True)
class RunOptions:
    """Validated options for one load test run.

    Attributes:
        url: Target URL every request is sent to.
        total_requests: Number of GET requests to issue.
        concurrency: Number of concurrent workers, never above
            ``total_requests``.
    """

    url: str
    total_requests: int
    concurrency: int


def load_config() -> LoadProbeConfig:
    """Load configuration from environment variables with defaults.

    Environment variables:
        LOADPROBE_TIMEOUT: Request timeout in seconds (default: 30.0).
        LOADPROBE_LOG_JSON: Emit JSON logs when truthy (default: off).

    Returns:
        Populated LoadProbeConfig instance.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    timeout_str = os.environ.get("LOADPROBE_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
    json_str = os.environ.get("LOADPROBE_LOG_JSON", "").strip().lower()

    try:
        timeout = float(timeout_str)
    except ValueError:
        msg = f"LOADPROBE_TIMEOUT must be a number, got: {timeout_str!r}"
        raise ConfigError(msg) from None

    if timeout <= 0:
        msg = f"LOADPROBE_TIMEOUT must be positive, got: {timeout}"
        raise ConfigError(msg)

    if json_str in _TRUTHY:
        json_logs = True
    elif json_str in _FALSY:
        json_logs = False
    else:
        msg = f"LOADPROBE_LOG_JSON must be a boolean flag, got: {json_str!r}"
        raise ConfigError(msg)

    return LoadProbeConfig(request_timeout=timeout, json_logs=json_logs)


def validate_run_options(url: str, requests: int, concurrency: int) -> RunOptions:
    """Check command-line run options and clamp the concurrency level.

    A concurrency level above the request count is not an error; it is
    reduced to the request count so that no worker starts without work.

    Args:
        url: Target URL.
        requests: Total number of requests.
        concurrency: Requested number of concurrent workers.

    Returns:
        The validated RunOptions.

    Raises:
        ConfigError: If the URL is empty or a count is not positive.
    """
    if not url.strip():
        msg = "URL is required"
        raise ConfigError(msg)

    if requests <= 0:
        msg = f"Number of requests must be greater than 0, got: {requests}"
        raise ConfigError(msg)

    if concurrency <= 0:
        msg = f"Concurrency level must be greater than 0, got: {concurrency}"
        raise ConfigError(msg)

    return RunOptions(
        url=url.strip(),
        total_requests=requests,
        concurrency=min(concurrency, requests),
    )
