"""Appliers record the current version of a structure."""

from abc import ABC, abstractmethod
from typing import Self

from .types import UNVERSIONED, VersionNumber


class VersionApplier(ABC):
    """Manages the stored version of a specific kind of structure.

    Any backend can implement version storage however it likes (a single
    mutable row, an append-only log, a key-value entry) as long as it provides
    these two operations.
    """

    @abstractmethod
    def current_version(self: Self) -> VersionNumber:
        """Return the current structure version.

        Returns:
            Recorded version number, or -1 if no version was ever recorded.
        """

    @abstractmethod
    def sync_version(self: Self, version_nb: VersionNumber) -> None:
        """Record a new current version for the structure.

        Args:
            version_nb: Version number the structure is now at.
        """


class InMemoryVersionApplier(VersionApplier):
    """Applier keeping the version history in memory.

    Useful for tests and for structures rebuilt on every process start.

    Attributes:
        history: Every version recorded, oldest first.
    """

    def __init__(self: Self, initial: VersionNumber = UNVERSIONED) -> None:
        """Initialize the applier.

        Args:
            initial: Version the structure starts at.
        """
        self.history: list[VersionNumber] = []
        self._initial = initial

    def current_version(self: Self) -> VersionNumber:
        """Return the last recorded version, or the initial one."""
        if not self.history:
            return self._initial
        return self.history[-1]

    def sync_version(self: Self, version_nb: VersionNumber) -> None:
        """Append the version to the history."""
        self.history.append(version_nb)
