"""Cooperative cancellation shared between the console layer and requests."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


class OperationCancelledError(Exception):
    """Raised when a :class:`CancellationToken` fires before work completes."""


class CancellationToken:
    """A one-shot cancellation flag that can be awaited.

    A token created with a ``parent`` is cancelled whenever the parent is,
    which lets a request own its token while still honouring the caller's.
    """

    def __init__(self, parent: Optional[CancellationToken] = None) -> None:
        self._event = asyncio.Event()
        self._callbacks: list[Callable[[], None]] = []
        if parent is not None:
            parent.add_callback(self.cancel)

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        if self._event.is_set():
            return
        self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancellation (immediately if already cancelled)."""
        if self._event.is_set():
            callback()
        else:
            self._callbacks.append(callback)

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError("Operation cancelled")


async def run_cancellable(awaitable: Awaitable[T], token: CancellationToken) -> T:
    """Await ``awaitable`` unless ``token`` fires first.

    When the token wins, the pending work is cancelled (closing any open
    HTTP stream it holds) and :class:`OperationCancelledError` is raised.
    """
    if token.is_cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise OperationCancelledError("Operation cancelled")
    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _pending = await asyncio.wait(
            {task, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if task in done:
        return task.result()

    task.cancel()
    # Collect the cancelled task so its exception is not reported as unretrieved.
    await asyncio.gather(task, return_exceptions=True)
    raise OperationCancelledError("Operation cancelled")
