"""First-success race over concurrent metadata fetches.

Hey future me - this is THE latency trick of the whole metadata pipeline. We don't
know which server software a stream runs on, so we ask 4-5 sources at once and take
whatever answers first with something usable. Total latency is the fastest success,
not the sum (or max) of all sources. Only when EVERYTHING fails do we wait for the
slowest one to give up.

Rules:
- a result counts only if it has now_playing set
- a task that raises counts as "finished without success", it never kills siblings
- once we have a winner the rest gets cancelled (their HTTP requests are aborted)
- if WE get cancelled (session stopped) all children get cancelled too
"""

import asyncio
import logging
from collections.abc import Awaitable, Iterable

from radiodial.domain.entities import MetadataResult

logger = logging.getLogger(__name__)


def _successful_result(task: asyncio.Task[MetadataResult | None]) -> MetadataResult | None:
    if task.cancelled():
        return None
    error = task.exception()
    if error is not None:
        logger.debug("Race participant failed: %s", error)
        return None
    result = task.result()
    if result is not None and result.now_playing:
        return result
    return None


async def first_non_null(
    awaitables: Iterable[Awaitable[MetadataResult | None]],
) -> MetadataResult | None:
    """Run all awaitables concurrently and return the first usable result.

    Args:
        awaitables: Fetch coroutines (or futures) to race

    Returns:
        First result with now_playing, None once all finished without one
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    if not tasks:
        return None

    pending: set[asyncio.Future[MetadataResult | None]] = set(tasks)
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            # Several can finish in the same loop iteration, list order breaks the tie
            for task in tasks:
                if task in done:
                    result = _successful_result(task)
                    if result is not None:
                        return result
        return None
    finally:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
