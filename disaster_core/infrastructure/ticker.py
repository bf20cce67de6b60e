"""
Fixed-interval tick source.

Runs a callback every ``interval`` seconds on the event loop until stopped.
Used to drive the water-level simulation.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from typing import Any, Awaitable, Callable

from loguru import logger


class TickSource:
    """
    Periodic callback runner bound to the application lifespan.

    Usage:
        ticker = TickSource(3.0, simulator.tick)
        ticker.start()
        ...
        await ticker.stop()
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Any],
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        name: str = "ticker",
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.callback = callback
        self.name = name
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running event loop. Idempotent."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        logger.info(f"{self.name} started (every {self.interval}s)")

    async def _run(self) -> None:
        while True:
            await self._sleep(self.interval)
            try:
                result = self.callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"{self.name} callback failed")
            self.ticks += 1

    async def stop(self) -> None:
        """Cancel the tick task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info(f"{self.name} stopped after {self.ticks} tick(s)")
