"""Events raised while syncing a structure version."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Self

from .version import Version


class EventType(StrEnum):
    """Type of event raised during version syncing.

    The values are part of the public contract listeners key on.
    """

    START = "start"
    END = "end"
    BEFORE_SYNC = "before-sync"
    AFTER_SYNC = "after-sync"
    BEFORE_CHANGE = "before-change"
    AFTER_CHANGE = "after-change"
    ERROR_DURING_CHANGE = "error-during-change"
    ERROR = "error"


@dataclass(frozen=True)
class Event:
    """A single lifecycle moment of a sync.

    Attributes:
        type: Kind of event.
        version: Version being changed, only set for per-change events.
        error: Failure being reported, only set for error events.
    """

    type: EventType
    version: Version | None = None
    error: Exception | None = None

    def __str__(self: Self) -> str:
        """Return string representation of the event.

        Returns:
            Event type, with the version number for per-change events.
        """
        if self.version is None:
            return str(self.type)
        return f"{self.type} (version {self.version.number})"
