"""Deferred recompute for callers that want to settle rapid input changes.

Evaluation is cheap and pure, so debouncing is only about not flickering
the advisory while someone is still typing. The scheduled call receives the
final input, so its result always matches an immediate evaluation.
"""

import asyncio
from typing import Any, Callable, Optional, TypeVar

from .env import get_config
from . import log

T = TypeVar("T")


class Debouncer:
    """Runs only the most recently scheduled call, after a quiet period."""

    def __init__(self, delay_s: Optional[float] = None):
        if delay_s is None:
            delay_s = get_config().tip_delay_ms / 1000
        self.delay_s = max(0.0, delay_s)
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        """True while a scheduled call has not run yet."""
        return self._task is not None and not self._task.done()

    def schedule(self, fn: Callable[..., T], *args: Any) -> "asyncio.Task[T]":
        """
        Schedule fn(*args) after the delay, replacing any pending call.

        Must be called from a running event loop.

        Returns:
            The task that will produce fn's result
        """
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(fn, args))
        return self._task

    async def _run(self, fn: Callable[..., T], args: tuple) -> T:
        await asyncio.sleep(self.delay_s)
        return fn(*args)

    def cancel(self) -> bool:
        """Cancel the pending call. Returns True if one was cancelled."""
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        log.debug("Cancelled pending recompute")
        return True
