"""Bounded, first-in first-out admission for async model calls."""

import asyncio
from collections import deque
from typing import Any, Awaitable, Callable, Deque, TypeVar

T = TypeVar("T")


class ConcurrencyLimiter:
    """Runs at most ``max_concurrency`` scheduled coroutines at once.

    Work scheduled while every slot is busy waits in submission order and is
    started as slots free up. A finishing call hands its slot straight to the
    oldest waiter, so later submissions can never overtake earlier ones.

    No timeout is applied: a call that never returns keeps its slot.
    """

    def __init__(self, max_concurrency: int = 3):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.max_concurrency = max_concurrency
        self._active = 0
        self._peak = 0
        self._waiters: Deque[asyncio.Future] = deque()

    @property
    def active(self) -> int:
        """Calls currently running."""
        return self._active

    @property
    def pending(self) -> int:
        """Calls waiting for a slot."""
        return sum(1 for w in self._waiters if not w.done())

    @property
    def peak(self) -> int:
        """Highest number of calls that ever ran at the same time."""
        return self._peak

    async def schedule(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Wait for a slot, then run ``fn(*args, **kwargs)`` and return its result."""
        await self._acquire()
        try:
            return await fn(*args, **kwargs)
        finally:
            self._release()

    async def _acquire(self) -> None:
        if self._active < self.max_concurrency and not self._waiters:
            self._take_slot()
            return

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # The slot was handed over just before cancellation; pass it on.
                self._release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise

    def _take_slot(self) -> None:
        self._active += 1
        self._peak = max(self._peak, self._active)

    def _release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                # Hand the slot over; the active count is unchanged.
                waiter.set_result(None)
                return
        self._active -= 1
