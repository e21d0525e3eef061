"""loadprobe: fire a fixed number of GET requests at a URL and report on them."""

from __future__ import annotations

from loadprobe._internal.errors import ConfigError, EngineError, LoadProbeError
from loadprobe.engine.executor import HttpExecutor, RequestOutcome
from loadprobe.engine.runner import LoadTestRunner, run_load_test
from loadprobe.metrics.models import Report

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "EngineError",
    "HttpExecutor",
    "LoadProbeError",
    "LoadTestRunner",
    "Report",
    "RequestOutcome",
    "run_load_test",
]
