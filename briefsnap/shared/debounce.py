"""Timer-debounced async call wrapper.

A new call cancels the pending one (the scheduled task is cancelled, not
merely ignored), so at most one invocation runs per quiet period.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Run an async function after delay_seconds of no further calls.

    Must be used from within a running event loop. Exceptions raised by the
    wrapped function are logged and kept on last_error; they do not escape
    into the event loop.
    """

    def __init__(
        self,
        delay_seconds: float,
        func: Callable[..., Awaitable[T]],
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self._delay = delay_seconds
        self._func = func
        self._task: asyncio.Task[None] | None = None
        self._pending_args: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self.last_result: T | None = None
        self.last_error: BaseException | None = None
        self.calls_superseded = 0

    @property
    def pending(self) -> bool:
        """True while a call is scheduled and has not started running."""
        return self._pending_args is not None

    def call(self, *args: Any, **kwargs: Any) -> None:
        """Schedule func(*args, **kwargs), cancelling any pending call.

        A call that has already started running is left to finish.
        """
        if self._pending_args is not None:
            self.calls_superseded += 1
            self._cancel_task()
        self._pending_args = (args, kwargs)
        self._task = asyncio.get_running_loop().create_task(self._run_later())

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._pending_args is not None:
            self._cancel_task()
            self._pending_args = None

    async def flush(self) -> T | None:
        """Run the pending call now (skipping the remaining delay) and return its result."""
        if self._pending_args is None:
            return None
        self._cancel_task()
        await self._invoke()
        return self.last_result

    async def wait(self) -> None:
        """Wait until no call is scheduled or running.

        A call made while waiting supersedes the awaited one; the wait then
        follows the newer call. asyncio.wait() does not propagate a
        cancellation of the awaited task, nor cancel it if the waiter is
        cancelled.
        """
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run_later(self) -> None:
        await asyncio.sleep(self._delay)
        await self._invoke()

    async def _invoke(self) -> None:
        if self._pending_args is None:
            return
        args, kwargs = self._pending_args
        self._pending_args = None
        try:
            self.last_result = await self._func(*args, **kwargs)
            self.last_error = None
        except Exception as e:
            self.last_error = e
            logger.exception("Debounced call to %s failed", getattr(self._func, "__name__", self._func))
