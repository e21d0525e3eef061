"""Worker coroutine: draw a token, issue one request, hand off the outcome."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loadprobe._internal.logging import get_logger

if TYPE_CHECKING:
    import asyncio

    from loadprobe.engine.distributor import WorkDistributor
    from loadprobe.engine.executor import RequestOutcome
    from loadprobe.engine.protocol import RequestExecutor

logger = get_logger("engine.worker")


async def run_worker(
    worker_id: int,
    url: str,
    distributor: WorkDistributor,
    execute: RequestExecutor,
    results: asyncio.Queue[RequestOutcome | None],
) -> int:
    """Process tokens until the distributor is exhausted.

    Every drawn token produces exactly one call to ``execute`` and exactly
    one outcome on ``results``. The worker does not retry and does not look
    at the outcome. Running out of tokens is its only way to finish.

    Args:
        worker_id: Identifier used in log messages.
        url: Target URL passed to the executor.
        distributor: Shared source of work tokens.
        execute: Shared request executor.
        results: Queue read by the aggregator. ``put`` waits while the
            queue is full.

    Returns:
        Number of requests this worker issued.
    """
    logger.debug("Worker started", extra={"worker_id": worker_id})
    issued = 0

    while distributor.draw() is not None:
        outcome = await execute(url)
        await results.put(outcome)
        issued += 1

    logger.debug("Worker finished after %d requests", issued, extra={"worker_id": worker_id})
    return issued
