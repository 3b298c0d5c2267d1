"""Watch outcome enumeration."""

from enum import Enum


class WatchStatus(Enum):
    """Outcome of one walk of a watch."""

    SUCCESS = "success"
    FAILURE = "failure"

    def to_gauge(self) -> int:
        """
        Convert status to its gauge value.

        Returns:
            int: 1 for SUCCESS, 0 for FAILURE
        """
        return {
            WatchStatus.SUCCESS: 1,
            WatchStatus.FAILURE: 0,
        }[self]
