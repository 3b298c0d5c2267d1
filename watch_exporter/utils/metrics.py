"""Result data structures for walks and scrapes."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
import time
from .status import WatchStatus


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class WalkResult:
    """Aggregate outcome of one directory walk."""

    files_visited: int = 0
    max_modification_time: datetime = EPOCH

    @property
    def epoch_seconds(self) -> int:
        """Latest modification time as whole seconds since the epoch."""
        return int((self.max_modification_time - EPOCH).total_seconds())


@dataclass(frozen=True)
class WatchObservation:
    """
    Observations for one watch in one scrape.

    ``files_visited`` and ``max_modification_time`` are only set when the
    walk succeeded; a failed walk leaves them as None instead of zero so it
    cannot be confused with an empty tree.
    """

    name: str
    status: WatchStatus
    duration_seconds: float
    files_visited: Optional[int] = None
    max_modification_time: Optional[int] = None
    labels: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is WatchStatus.SUCCESS

    @classmethod
    def from_walk(
        cls,
        name: str,
        result: WalkResult,
        duration_seconds: float,
        labels: Optional[Dict[str, str]] = None
    ) -> "WatchObservation":
        return cls(
            name=name,
            status=WatchStatus.SUCCESS,
            duration_seconds=duration_seconds,
            files_visited=result.files_visited,
            max_modification_time=result.epoch_seconds,
            labels=dict(labels or {}),
        )

    @classmethod
    def failed(
        cls,
        name: str,
        error: str,
        duration_seconds: float,
        labels: Optional[Dict[str, str]] = None
    ) -> "WatchObservation":
        return cls(
            name=name,
            status=WatchStatus.FAILURE,
            duration_seconds=duration_seconds,
            labels=dict(labels or {}),
            error=error,
        )


@dataclass
class ObservationSet:
    """Standard result format of one scrape, in configured watch order."""

    observations: List[WatchObservation] = field(default_factory=list)
    timestamp: Optional[float] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = time.time()

    def __iter__(self):
        return iter(self.observations)

    def __len__(self) -> int:
        return len(self.observations)

    def get(self, name: str) -> Optional[WatchObservation]:
        """Return the observation for a watch name, or None."""
        for observation in self.observations:
            if observation.name == name:
                return observation
        return None

    @property
    def failed(self) -> List[WatchObservation]:
        return [o for o in self.observations if not o.success]
