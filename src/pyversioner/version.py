"""Versions the versioner applies to a structure."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Self

from .exceptions import RollbackUnsupportedError
from .types import ScriptFunc, VersionNumber


class Version(ABC):
    """A numbered change that can upgrade or roll back a structure.

    Version numbers don't need to follow a successive series, but the higher the
    number, the more up-to-date a structure is. Start at 0, 0 being the empty
    state.
    """

    @property
    @abstractmethod
    def number(self: Self) -> VersionNumber:
        """Version number of this change."""

    @abstractmethod
    def upgrade(self: Self) -> None:
        """Apply the change to the structure."""

    @abstractmethod
    def rollback(self: Self) -> None:
        """Revert the change from the structure.

        Raises:
            RollbackUnsupportedError: If the change cannot be reverted.
        """


@dataclass(frozen=True)
class ScriptVersion(Version):
    """Version built from plain callables.

    Attributes:
        version_number: Version number of the change.
        upgrade_func: Callable applying the change.
        rollback_func: Callable reverting the change. When missing, rolling back
            raises RollbackUnsupportedError.
        description: Human readable summary of the change.

    Example:
        >>> def create_users() -> None:
        ...     connection.execute("CREATE TABLE users (id INTEGER PRIMARY KEY)")
        >>> version = ScriptVersion(1, create_users, description="users table")
    """

    version_number: VersionNumber
    upgrade_func: ScriptFunc = field(repr=False)
    rollback_func: ScriptFunc | None = field(default=None, repr=False)
    description: str = ""

    @property
    def number(self: Self) -> VersionNumber:
        """Version number of this change."""
        return self.version_number

    def upgrade(self: Self) -> None:
        """Run the upgrade callable."""
        self.upgrade_func()

    def rollback(self: Self) -> None:
        """Run the rollback callable.

        Raises:
            RollbackUnsupportedError: If no rollback callable was given.
        """
        if self.rollback_func is None:
            raise RollbackUnsupportedError(self.version_number)
        self.rollback_func()

    def __str__(self: Self) -> str:
        """Return string representation of the version.

        Returns:
            Version number, followed by the description when there is one.
        """
        if self.description:
            return f"{self.version_number} ({self.description})"
        return str(self.version_number)
