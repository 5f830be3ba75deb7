"""Cancellable task slot where the most recent call supersedes older ones."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class LatestTask(Generic[T]):
    """Run coroutines one slot at a time, cancelling whatever is still in flight.

    ``run`` returns ``(True, result)`` when its coroutine finished and
    ``(False, None)`` when a newer call superseded it first. Exceptions raised
    by the coroutine propagate to the caller that started it.
    """

    def __init__(self) -> None:
        self._current: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._current is not None and not self._current.done()

    def cancel(self) -> bool:
        task = self._current
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def run(self, coro: Awaitable[T]) -> Tuple[bool, Optional[T]]:
        self.cancel()
        task = asyncio.ensure_future(coro)
        self._current = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._current is task and task.done():
                self._current = None

        if task.cancelled():
            return False, None
        return True, task.result()


__all__ = ["LatestTask"]
