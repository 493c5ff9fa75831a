"""
Run context for the crawl loop.

Wraps an asyncio.Event so the forever-loop can be stopped from outside
(signal handlers, tests, supervisors). Sleeps wake early on cancel.
"""

import asyncio


class RunContext:
    """Cancellation token shared by the driver and its sleeps."""

    def __init__(self) -> None:
        self._cancelled = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    async def sleep(self, seconds: float) -> bool:
        """
        Wait for `seconds` unless cancelled first.

        Returns:
            True if the full interval elapsed, False if cancelled
        """
        if self.cancelled:
            return False
        if seconds <= 0:
            # Still yield so a cancel from another task can land
            await asyncio.sleep(0)
            return not self.cancelled
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return True
        return False
