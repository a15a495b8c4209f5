"""
Detached background work.

Side effects that must not hold up (or be cancelled with) the message that
caused them, such as log sends and invite lookups, are spawned here. The
owner keeps a strong reference until each task finishes, logs failures, and
drains what is left at shutdown.
"""

from __future__ import annotations

import asyncio
from typing import Coroutine, Set

from warden.util.logger import get_logger

logger = get_logger("background")


class BackgroundTasks:
    """Set of detached tasks with no parent cancellation link."""

    def __init__(self) -> None:
        self._active: Set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._active)

    def spawn(self, coro: Coroutine, name: str | None = None) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._active.add(task)

        def _cleanup(completed: asyncio.Task) -> None:
            self._active.discard(completed)
            if completed.cancelled():
                return
            exc = completed.exception()
            if exc is not None:
                logger.error(
                    "[BACKGROUND] Task %s failed: %s",
                    completed.get_name(),
                    exc,
                    exc_info=(type(exc), exc, exc.__traceback__),
                )

        task.add_done_callback(_cleanup)
        return task

    async def drain(self) -> None:
        """Wait for every task still running."""
        pending = list(self._active)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel what is still running and wait for it to settle."""
        pending = list(self._active)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._active.clear()
        logger.info("[BACKGROUND] Background tasks shut down (%d cancelled)", len(pending))
