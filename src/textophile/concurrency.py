from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from .errors import ReadTimeoutError

T = TypeVar("T")


async def wait_or_expire(coro: Awaitable[T], timeout: float | None) -> T:
    """Wait for the given coroutine to complete, unless ``timeout`` seconds pass first.

    On expiry the task is cancelled and drained before ``ReadTimeoutError`` is
    raised; anything it produces afterwards is dropped.
    """
    fut = asyncio.ensure_future(coro)
    try:
        done, _ = await asyncio.wait({fut}, timeout=timeout)
        if fut not in done:
            raise ReadTimeoutError(f"no input within {timeout} seconds")
        return fut.result()
    finally:
        if not fut.done():
            fut.cancel()
            await asyncio.wait({fut})
