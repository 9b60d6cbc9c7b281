"""Shared concurrency primitives for the enrichment pipeline.

Two patterns are exposed:

1. **throttled_gather** -- ``asyncio.gather`` with every awaitable wrapped in
   a semaphore acquire/release, so a batch of events never opens more than
   N concurrent resolutions against the external authorities.

2. **PeriodicSweeper** -- a background task that calls a sweep callback on
   a fixed interval.  TTL caches expire lazily on read; the sweeper reclaims
   entries nobody reads again, independent of request flow.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Awaitable, Callable, TypeVar

import structlog

from event_enricher.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most ``semaphore`` slots at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Semaphore bounding how many awaitables run at once.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input coroutines.
    """

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)


class PeriodicSweeper:
    """Runs ``sweep`` every ``interval`` seconds in a background task.

    Parameters
    ----------
    sweep:
        Zero-argument callable returning the number of reclaimed entries.
    interval:
        Seconds between two sweeps.
    name:
        Label used in log events.
    """

    def __init__(
        self,
        sweep: Callable[[], int],
        interval: float,
        name: str = "cache",
    ) -> None:
        self._sweep = sweep
        self._interval = interval
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the sweep loop on the running event loop (idempotent)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=f"sweeper:{self._name}")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                removed = self._sweep()
            except Exception as exc:  # keep the loop alive; next tick retries
                _logger.warning("cache_sweep_failed", cache=self._name, error=str(exc))
                continue
            if removed:
                _logger.debug("cache_swept", cache=self._name, removed=removed)
