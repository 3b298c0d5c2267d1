"""Collector walking every configured watch once per scrape."""

import asyncio
import logging
import time
from concurrent.futures import Executor
from typing import List, Optional

from ..config.models import WatchSpec
from ..utils.metrics import ObservationSet, WatchObservation
from .base import BaseCollector, safe_observe
from .dir_walker import DirectoryWalker, WalkError


class FileWatchCollector(BaseCollector):
    """
    Walk each configured watch and turn the outcomes into observations.

    Watches are walked one after another in configured order. Each walk is
    blocking filesystem work and runs on an executor thread so the event
    loop driving the scrape stays responsive. The collector holds no state
    between scrapes; the watch list is only read.
    """

    def __init__(
        self,
        config: List[WatchSpec],
        logger: logging.Logger,
        walker: Optional[DirectoryWalker] = None,
        executor: Optional[Executor] = None
    ):
        """
        Initialize file watch collector.

        Args:
            config: Watches to walk, in exposition order
            logger: Logger instance
            walker: Directory walker (a default one is created if omitted)
            executor: Executor for blocking walks (loop default if omitted)
        """
        super().__init__(list(config), logger)
        self.walker = walker or DirectoryWalker(self.logger)
        self.executor = executor

    async def collect(self) -> ObservationSet:
        """
        Walk all configured watches.

        Returns:
            ObservationSet: One observation per watch, in configured order
        """
        if not self.config:
            self.logger.info("No file watchers configured")
            return ObservationSet()

        self.logger.debug(f"Walking {len(self.config)} watch(es)")

        observations = []
        for spec in self.config:
            observations.append(await self._observe(spec))

        result = ObservationSet(observations=observations)
        if result.failed:
            names = ', '.join(o.name for o in result.failed)
            self.logger.warning(f"{len(result.failed)} watch(es) failed: {names}")

        return result

    @safe_observe
    async def _observe(self, spec: WatchSpec) -> WatchObservation:
        """
        Walk a single watch and time it.

        Args:
            spec: Watch to walk

        Returns:
            WatchObservation: Success with count and latest mtime, or failure
        """
        loop = asyncio.get_running_loop()
        start = time.monotonic()
        try:
            result = await loop.run_in_executor(self.executor, self.walker.walk, spec)
        except WalkError as e:
            duration = time.monotonic() - start
            return WatchObservation.failed(
                spec.name,
                error=str(e),
                duration_seconds=duration,
                labels=spec.labels
            )

        duration = time.monotonic() - start
        return WatchObservation.from_walk(
            spec.name,
            result,
            duration_seconds=duration,
            labels=spec.labels
        )
