"""Coroutine scheduling for fire-and-forget load calls.

CoroutineExecutor.run() never blocks and never runs the coroutine inline:

- Inside a running event loop, the coroutine becomes a task on that loop.
- Given a loop owned by another thread, it is submitted thread-safely.
- With no loop at all, or when the given loop is already closed, it runs on
  a private loop in a worker thread.

Worker threads are not daemons: interpreter shutdown waits for a pending load
to release its package and fire its callback.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from collections.abc import Coroutine
from typing import Any

__all__ = ["CoroutineExecutor"]

logger = logging.getLogger(__name__)

_THREAD_NAME = "packlocale-load"


def _log_failure(future: asyncio.Future[Any] | concurrent.futures.Future[Any]) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Scheduled load failed: %s", exc, exc_info=exc)


def _run_to_completion(coro: Coroutine[Any, Any, Any]) -> None:
    try:
        asyncio.run(coro)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Scheduled load failed: %s", e, exc_info=True)


class CoroutineExecutor:
    """Schedules coroutines without blocking the caller.

    Tasks created on a running loop are referenced until they finish, so
    they cannot be garbage collected mid-flight. Exceptions escaping a
    scheduled coroutine are logged, never dropped.

    Args:
        loop: Event loop to submit to. None (default) uses the caller's
            running loop, or a worker thread when there is none.
    """

    __slots__ = ("_loop", "_tasks")

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of tasks started on the caller's loop that have not finished."""
        return len(self._tasks)

    def run(self, coro: Coroutine[Any, Any, Any]) -> None:
        """Schedule a coroutine.

        Args:
            coro: Coroutine to run to completion
        """
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        target = self._loop or running
        if target is not None and target is running:
            task = target.create_task(coro)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)
            return

        if target is not None:
            try:
                future = asyncio.run_coroutine_threadsafe(coro, target)
            except RuntimeError as e:
                logger.warning(
                    "Cannot submit %s to its event loop (%s), using a worker thread",
                    coro.__qualname__,
                    e,
                )
            else:
                future.add_done_callback(_log_failure)
                return

        thread = threading.Thread(target=_run_to_completion, args=(coro,), name=_THREAD_NAME)
        thread.start()
        logger.debug("Scheduled %s on worker thread %s", coro.__qualname__, thread.name)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        _log_failure(task)
