"""Single-shot timed HTTP GET executor built on ``aiohttp``."""

from __future__ import annotations

import time
from dataclasses import dataclass

import aiohttp

from loadprobe._internal.config import DEFAULT_REQUEST_TIMEOUT
from loadprobe._internal.logging import get_logger

logger = get_logger("engine.executor")


@dataclass(frozen=True)
class RequestOutcome:
    """Result of exactly one GET request.

    Attributes:
        status_code: HTTP status code as returned by the server, or None
            if the request failed before a response arrived.
        duration_ms: Wall-clock latency in milliseconds, measured around
            the whole call, failures and timeouts included.
        error: ``"<ExceptionType>: <message>"`` if the request failed,
            None otherwise.
    """

    status_code: int | None
    duration_ms: float
    error: str | None = None

    @property
    def failed(self) -> bool:
        """True if the request produced no HTTP response."""
        return self.error is not None

    @property
    def error_type(self) -> str | None:
        """Exception type name of a failure, e.g. ``"ClientConnectorError"``."""
        if self.error is None:
            return None
        return self.error.split(":", 1)[0].strip()


class HttpExecutor:
    """Shared GET executor wrapping one ``aiohttp.ClientSession``.

    A single instance is created per run and called concurrently by every
    worker. Its configuration is fixed once the session is opened; each
    call is independent and leaves no state behind.

    Attributes:
        request_timeout: Total timeout per request, in seconds.
        pool_limit: Maximum simultaneous connections (0 means unlimited).
    """

    def __init__(
        self,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        pool_limit: int = 0,
    ) -> None:
        """Initialize the executor.

        Args:
            request_timeout: Total timeout per request, in seconds.
            pool_limit: Connection pool size. The runner passes the worker
                count so the pool never throttles below it.
        """
        self.request_timeout = request_timeout
        self.pool_limit = pool_limit
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> HttpExecutor:
        """Open the underlying aiohttp session."""
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.request_timeout),
            connector=aiohttp.TCPConnector(limit=self.pool_limit),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Close the underlying aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __call__(self, url: str) -> RequestOutcome:
        """Send one GET request and time it.

        The response body is never read. Leaving the ``async with`` block
        releases the response and its connection whether or not the call
        succeeded.

        Args:
            url: Target URL.

        Returns:
            A RequestOutcome carrying either the status code or the error.

        Raises:
            RuntimeError: If the executor is used outside of an async
                context manager.
        """
        if self._session is None:
            msg = "HttpExecutor must be used as an async context manager"
            raise RuntimeError(msg)

        start = time.monotonic()
        try:
            async with self._session.get(url) as resp:
                duration_ms = (time.monotonic() - start) * 1000
                status_code = resp.status
        except Exception as exc:
            duration_ms = (time.monotonic() - start) * 1000
            error = f"{type(exc).__name__}: {exc}"
            logger.debug("GET %s failed after %.1fms: %s", url, duration_ms, error)
            return RequestOutcome(status_code=None, duration_ms=duration_ms, error=error)

        return RequestOutcome(status_code=status_code, duration_ms=duration_ms)
