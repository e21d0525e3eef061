"""Pre-filled work queue handing out one token per request."""

from __future__ import annotations

import asyncio

from loadprobe._internal.errors import ConfigError


class WorkDistributor:
    """Fixed, already-closed sequence of work tokens.

    All ``total_requests`` tokens are enqueued at construction, before any
    worker exists, and nothing is added afterwards. Drawing therefore never
    waits: a worker either gets a token or learns that the work is done.

    Tokens are plain integers. Their value carries no meaning and is not
    used to correlate outcomes.
    """

    def __init__(self, total_requests: int) -> None:
        """Create the queue and fill it.

        Args:
            total_requests: Number of tokens to hand out.

        Raises:
            ConfigError: If ``total_requests`` is negative.
        """
        if total_requests < 0:
            msg = f"total_requests must be >= 0, got: {total_requests}"
            raise ConfigError(msg)

        self.total_requests = total_requests
        self._tokens: asyncio.Queue[int] = asyncio.Queue(maxsize=total_requests)
        for token in range(total_requests):
            self._tokens.put_nowait(token)

    @property
    def remaining(self) -> int:
        """Number of tokens not yet drawn."""
        return self._tokens.qsize()

    def __len__(self) -> int:
        return self.remaining

    def draw(self) -> int | None:
        """Take the next token.

        Returns:
            A token, or None once every token has been drawn.
        """
        try:
            return self._tokens.get_nowait()
        except asyncio.QueueEmpty:
            return None
