import asyncio
import contextlib
import logging
from typing import Optional

from .manager import SessionManager

logger = logging.getLogger(__name__)


class SessionSweeper:
    """
    Periodic background task that expires idle sessions.

    The loop waits on a stop event between runs, so stop() takes effect
    without waiting out the remainder of the interval.
    """

    def __init__(self, manager: SessionManager, interval: Optional[float] = None):
        """
        Initialize sweeper.

        Args:
            manager: Manager whose provider is swept
            interval: Seconds between sweeps (defaults to the configured sweep interval)
        """
        self.manager = manager
        self.interval = interval or manager.config.effective_sweep_interval
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start sweeping in the background. Calling start() twice is a no-op."""
        if self.running:
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name="session-sweeper")
        logger.info(f"Session sweeper started (interval={self.interval}s)")

    async def stop(self) -> None:
        """Stop the background task and wait for it to finish."""
        if self._task is None:
            return
        self._stop.set()
        task, self._task = self._task, None
        try:
            await asyncio.wait_for(task, timeout=5)
        except asyncio.TimeoutError:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("Session sweeper stopped")

    async def run_once(self) -> int:
        """Run a single sweep, logging instead of raising on failure."""
        try:
            return await self.manager.run_sweep()
        except Exception as e:
            logger.error(f"Session sweep failed: {e}", exc_info=True)
            return 0

    async def _run(self) -> None:
        while not self._stop.is_set():
            await self.run_once()
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
