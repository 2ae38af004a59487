"""
Async counting gate with in-flight and peak tracking.
"""

import asyncio
import logging

logger = logging.getLogger(__name__)


class InFlightGate:
    """A counting semaphore for asyncio tasks that records how many attempts are in flight."""

    def __init__(self, permits: int):
        """Initialize the gate with the given number of permits.

        Args:
            permits: Maximum number of attempts allowed in flight at once
        """
        if permits < 1:
            raise ValueError(f"InFlightGate needs at least one permit, got {permits}")

        self._max_permits = permits
        self._in_flight = 0
        self._peak_in_flight = 0
        self._condition = asyncio.Condition()

        logger.debug(f"Initialized InFlightGate with {permits} permits")

    async def acquire(self) -> None:
        """Wait until a permit is free and take it."""
        async with self._condition:
            while self._in_flight >= self._max_permits:
                await self._condition.wait()
            self._in_flight += 1
            if self._in_flight > self._peak_in_flight:
                self._peak_in_flight = self._in_flight

    async def release(self) -> None:
        """Release a permit back to the gate."""
        async with self._condition:
            if self._in_flight > 0:
                self._in_flight -= 1
                self._condition.notify()
            else:
                logger.warning("Attempted to release gate when in_flight is 0")

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.release()

    def in_flight(self) -> int:
        """Get the current number of in-flight attempts."""
        return self._in_flight

    def peak_in_flight(self) -> int:
        """Get the highest number of attempts that were ever in flight together."""
        return self._peak_in_flight

    def available_permits(self) -> int:
        return self._max_permits - self._in_flight

    def max_permits(self) -> int:
        return self._max_permits

    def __repr__(self) -> str:
        """String representation of the gate."""
        return (
            f"InFlightGate(permits={self.available_permits()}/{self._max_permits}, "
            f"in_flight={self._in_flight}, peak={self._peak_in_flight})"
        )
