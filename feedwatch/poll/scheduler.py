"""Background task that polls all feeds periodically."""

import asyncio
import logging

from feedwatch.storage import FeedStore

from .checker import check_all_feeds

logger = logging.getLogger(__name__)


class PollScheduler:
    """Runs check_all_feeds on startup and then at a fixed interval."""

    def __init__(
        self, store: FeedStore, interval_minutes: int, run_on_startup: bool = True
    ):
        self.store = store
        self.interval_seconds = interval_minutes * 60
        self.run_on_startup = run_on_startup
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the polling loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="feedwatch-poll")
        logger.info("Poll scheduler started (every %ds)", self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the polling loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Poll scheduler stopped")

    async def run_once(self) -> None:
        """Run a single poll cycle, logging instead of raising on failure."""
        try:
            await check_all_feeds(self.store)
        except Exception:
            logger.exception("Poll cycle failed")

    async def _run(self) -> None:
        if not self.run_on_startup:
            await asyncio.sleep(self.interval_seconds)
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)
