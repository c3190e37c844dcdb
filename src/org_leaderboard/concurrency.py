"""Bounded-parallelism task scheduling."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def gather_bounded(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    parallelism: int,
) -> list[R]:
    """Run ``worker`` over ``items`` with at most ``parallelism`` in flight.

    Results come back in input order regardless of completion order.
    Exceptions from ``worker`` propagate after the remaining tasks are
    cancelled; wrap the worker to recover per item.
    """
    if parallelism < 1:
        raise ValueError("parallelism must be at least 1")
    if not items:
        return []

    semaphore = asyncio.Semaphore(min(parallelism, len(items)))

    async def _run(item: T) -> R:
        async with semaphore:
            return await worker(item)

    tasks = [asyncio.ensure_future(_run(item)) for item in items]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        # Drain so late failures from siblings are retrieved.
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
