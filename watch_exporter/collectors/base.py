"""Base collector abstract class."""

from abc import ABC, abstractmethod
from typing import Any
import logging
import time
from functools import wraps

from ..utils.metrics import ObservationSet, WatchObservation


class BaseCollector(ABC):
    """Abstract base class for all collectors."""

    def __init__(self, config: Any, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            config: Collector-specific configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    async def collect(self) -> ObservationSet:
        """
        Collect observations for one scrape.

        Returns:
            ObservationSet: Fresh observations, one per configured target

        Note:
            Implementations should use @safe_observe on their per-target
            method so one failing target cannot affect the others.
        """
        pass


def safe_observe(func):
    """
    Decorator isolating the observation of one watch.

    Any exception escaping the wrapped coroutine is logged with its
    traceback and turned into a failed observation for that watch only.

    Args:
        func: Coroutine method taking a WatchSpec as first argument

    Returns:
        Wrapped coroutine that never raises for a single watch
    """
    @wraps(func)
    async def wrapper(self, spec, *args, **kwargs):
        start = time.monotonic()
        try:
            return await func(self, spec, *args, **kwargs)
        except Exception as e:
            self.logger.error(f"[{spec.name}] Observation failed: {e}", exc_info=True)
            return WatchObservation.failed(
                spec.name,
                error=str(e),
                duration_seconds=time.monotonic() - start,
                labels=spec.labels
            )
    return wrapper
