"""Bounded fan-out of repository calls with ordered fan-in.

Calls run concurrently under a semaphore, but results come back in the order
the calls were submitted, so anything committed from them (report entries,
candidate sequences) is independent of network arrival order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar


T = TypeVar("T")


async def gather_ordered(
    calls: Sequence[Callable[[], Awaitable[T]]],
    *,
    max_concurrency: int,
    timeout: float | None = None,
) -> list[T | Exception]:
    """Run ``calls`` with bounded concurrency and return outcomes by submission index.

    Each slot holds either the call's result or the ``Exception`` it raised
    (``asyncio.TimeoutError`` when ``timeout`` elapsed). Cancellation is not
    captured: cancelling the caller cancels every outstanding call.
    """
    if not calls:
        return []

    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def _run(call: Callable[[], Awaitable[T]]) -> T | Exception:
        async with semaphore:
            try:
                if timeout is None:
                    return await call()
                return await asyncio.wait_for(call(), timeout)
            except Exception as exc:
                return exc

    return list(await asyncio.gather(*(_run(call) for call in calls)))
