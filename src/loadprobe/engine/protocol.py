"""Protocol type for the request executor shared by all workers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from loadprobe.engine.executor import RequestOutcome


class RequestExecutor(Protocol):
    """Anything that performs one GET and reports its outcome.

    Implementations must never raise for a failed request: transport
    errors, timeouts and the like are returned as a failure outcome.
    ``HttpExecutor`` is the production implementation; tests plug in
    deterministic fakes.
    """

    async def __call__(self, url: str) -> RequestOutcome:
        """Issue exactly one GET to ``url`` and return its outcome."""
        ...
