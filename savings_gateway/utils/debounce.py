"""Coalesce bursts of triggers into one call with the latest value"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Union

Callback = Callable[[Any], Union[None, Awaitable[None]]]


class Debouncer:
    """
    Delay a callback until triggers stop arriving for `delay_seconds`.

    Each trigger replaces the pending value, so only the most recent input
    is delivered (last write wins). Must be used from a running event loop.
    """

    def __init__(self, callback: Callback, delay_seconds: float):
        self.callback = callback
        self.delay_seconds = delay_seconds
        self._pending: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def trigger(self, value: Any) -> None:
        """Schedule the callback with `value`, replacing any pending call"""
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._fire_later(value))

    def cancel(self) -> None:
        if self.pending:
            self._pending.cancel()
        self._pending = None

    async def _fire_later(self, value: Any) -> None:
        await asyncio.sleep(self.delay_seconds)
        result = self.callback(value)
        if asyncio.iscoroutine(result):
            await result
