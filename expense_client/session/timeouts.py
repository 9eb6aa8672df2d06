from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from ..errors.internal import ValidationTimeoutError

T = TypeVar("T")


async def race_timeout(awaitable: Awaitable[T], timeout: float, message: str) -> T:  # type: ignore[valid-type]
    """Await ``awaitable`` for at most ``timeout`` seconds.

    Whichever settles first wins. When the timer wins, the awaitable is
    cancelled and its eventual result can no longer reach the caller.
    Awaiting an ``asyncio.shield`` here abandons the shielded work instead
    of cancelling it.

    Raises:
        ValidationTimeoutError: The timer fired first.
    """
    timer = asyncio.timeout(timeout)
    try:
        async with timer:
            return await awaitable
    except TimeoutError as e:
        # A TimeoutError raised by the awaitable itself is not ours to rename.
        if not timer.expired():
            raise
        raise ValidationTimeoutError(message, data={"timeout": timeout}) from e
