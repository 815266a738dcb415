from __future__ import annotations

import asyncio
import contextlib
import logging

from .config import DEFAULT_SCHEDULER_CONFIG, SchedulerConfig
from .service import SyncService

logger = logging.getLogger(__name__)


class PeriodicSync:
    """Runs ``service.run_sync`` once on start and then every interval until stopped."""

    def __init__(self, service: SyncService, config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG) -> None:
        self.service = service
        self.interval = config.interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="menu-sync-scheduler")
        logger.info("Scheduled menu sync every %.0f seconds", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _loop(self) -> None:
        while True:
            try:
                await self.service.run_sync(trigger="scheduled")
            except Exception:
                # The next tick is the retry.
                logger.error("Scheduled sync failed", exc_info=True)
            await asyncio.sleep(self.interval)
