"""Bounded, first-come-first-served admission for scrape-bearing tasks."""

import asyncio
from collections import deque
from typing import Deque


class ConcurrencyGate:
    """Admits at most `limit` holders at a time, in arrival order.

    A released slot is handed straight to the oldest waiter, so a newcomer
    can never overtake a task that is already queued.
    """

    def __init__(self, limit: int = 4):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self._active = 0
        self._waiters: Deque[asyncio.Future] = deque()

    @property
    def active(self) -> int:
        return self._active

    @property
    def waiting(self) -> int:
        return sum(1 for w in self._waiters if not w.done())

    async def admit(self) -> None:
        """Wait for a slot."""
        if self._active < self.limit and not self.waiting:
            self._active += 1
            return

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            # Slot was already handed over; pass it on instead of leaking it
            if waiter.done() and not waiter.cancelled():
                self.release()
            raise

    def release(self) -> None:
        """Give the slot to the next waiter, or free it."""
        if self._active <= 0:
            raise RuntimeError("release() called more times than admit()")

        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)  # slot transfers, active count unchanged
                return

        self._active -= 1

    async def __aenter__(self):
        await self.admit()
        return self

    async def __aexit__(self, *args):
        self.release()
