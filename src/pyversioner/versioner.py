"""Versioner class."""

import logging
from collections.abc import Callable, Iterable
from typing import Self

from .applier import VersionApplier
from .events import Event, EventType
from .exceptions import (
    ChangeError,
    ListenerVetoError,
    PersistError,
    ReadError,
)
from .listeners import Listener, NoOpListener
from .types import Direction, ScriptFunc, VersionNumber
from .version import ScriptVersion, Version

logger = logging.getLogger(__name__)


class Versioner:
    """Upgrades or rolls back a structure to a target version.

    The versioner reads the current version from its applier, selects the
    versions lying strictly between the current and target versions, and
    applies them one at a time, recording each new version through the applier
    as soon as its change succeeds. Its listener is notified at every step and
    can abort the sync by raising.

    Versions lying exactly on the current or target version are never applied:
    the current one is considered applied already and the target one is not
    wanted yet.

    Attributes:
        applier: Applier owning the stored version of the structure.
        versions: Versions the structure can be synced through. Sorted in place
            by each sync.
        listener: Listener notified of sync events.

    Example:
        ```python
        applier = SQLiteVersionApplier(connection)
        versioner = Versioner(applier, [SQLiteVersioning(connection)])

        @versioner.script(1, description="users table")
        def create_users() -> None:
            connection.execute("CREATE TABLE users (id INTEGER PRIMARY KEY)")

        versioner.listener = LoggingListener()
        versioner.upgrade_to_last()
        ```
    """

    def __init__(
        self: Self,
        applier: VersionApplier,
        versions: Iterable[Version] = (),
        listener: Listener | None = None,
    ) -> None:
        """Initialize the versioner.

        Args:
            applier: Applier owning the stored version of the structure.
            versions: Versions the structure can be synced through.
            listener: Listener notified of sync events. Defaults to a listener
                ignoring every event.
        """
        self.applier = applier
        self.versions: list[Version] = list(versions)
        self.listener: Listener = listener if listener is not None else NoOpListener()

    def add(self: Self, version: Version) -> None:
        """Add a version to the versioner.

        Args:
            version: Version to add. Its number should not be used by another
                version, as the order of versions sharing a number is undefined.
        """
        self.versions.append(version)

    def script(
        self: Self,
        number: VersionNumber,
        rollback: ScriptFunc | None = None,
        description: str | None = None,
    ) -> Callable[[ScriptFunc], ScriptFunc]:
        """Register a function as the upgrade of a new version.

        Args:
            number: Version number of the change.
            rollback: Function reverting the change. Without it, rolling back
                this version fails.
            description: Summary of the change. Defaults to the first line of
                the function docstring.

        Returns:
            Decorator registering the function and returning it unchanged.

        Example:
            ```python
            def drop_users() -> None:
                connection.execute("DROP TABLE users")

            @versioner.script(1, rollback=drop_users)
            def create_users() -> None:
                '''Create the users table.'''
                connection.execute("CREATE TABLE users (id INTEGER PRIMARY KEY)")
            ```
        """

        def decorator(func: ScriptFunc) -> ScriptFunc:
            summary = description
            if summary is None:
                summary = (func.__doc__ or "").strip().split("\n")[0]
            self.add(ScriptVersion(number, func, rollback, summary))
            return func

        return decorator

    def current_version(self: Self) -> VersionNumber:
        """Return the current structure version without applying any change.

        Returns:
            Current version, or -1 if the structure was never versioned.
        """
        return self.applier.current_version()

    def last_version(self: Self) -> VersionNumber:
        """Return the last applicable version.

        Returns:
            Highest version number held, or 0 when there is no version.
        """
        return max((version.number for version in self.versions), default=0)

    def upgrade_to_last(self: Self) -> None:
        """Upgrade the structure to the last available version."""
        self.sync(self.last_version())

    def plan(
        self: Self, target_version: VersionNumber, current_version: VersionNumber
    ) -> tuple[Direction, list[Version]]:
        """Compute the versions to apply to move between two versions.

        Sorts the held versions by number.

        Args:
            target_version: Version to reach.
            current_version: Version the structure is at.

        Returns:
            Direction of the sync and the versions to apply, in order: ascending
            when upgrading, descending when rolling back.
        """
        self.versions.sort(key=lambda version: version.number)

        if target_version < current_version:
            to_apply = [
                version
                for version in self.versions
                if target_version < version.number < current_version
            ]
            return Direction.ROLLBACK, to_apply[::-1]

        to_apply = [
            version
            for version in self.versions
            if current_version < version.number < target_version
        ]
        return Direction.UPGRADE, to_apply

    def sync(self: Self, target_version: VersionNumber) -> None:
        """Sync the structure to the specified version.

        Args:
            target_version: Version to reach.

        Raises:
            ReadError: If the current version cannot be read.
            ChangeError: If a version upgrade or rollback fails.
            PersistError: If a new version cannot be recorded.
            ListenerVetoError: If the listener fails on an event.
        """
        self._emit(Event(EventType.START))

        try:
            current_version = self.current_version()
        except Exception as e:
            raise ReadError(self._report(Event(EventType.ERROR, error=e))) from e

        if current_version == target_version:
            self._emit(Event(EventType.END))
            return

        direction, to_apply = self.plan(target_version, current_version)
        logger.debug(
            "%s from version %d to %d: %d version(s) to apply",
            direction,
            current_version,
            target_version,
            len(to_apply),
        )

        self._emit(Event(EventType.BEFORE_SYNC))
        for version in to_apply:
            self._apply(version, direction)
        self._emit(Event(EventType.AFTER_SYNC))

        self._emit(Event(EventType.END))

    def _apply(self: Self, version: Version, direction: Direction) -> None:
        """Apply a single version and record it.

        A veto of the change is reported as an error during the change, so that
        listeners which prepared for it can release what they hold.
        """
        try:
            self.listener.on(Event(EventType.BEFORE_CHANGE, version))
        except Exception as e:
            listener_error = self._report(
                Event(EventType.ERROR_DURING_CHANGE, version, e)
            )
            raise ListenerVetoError(
                EventType.BEFORE_CHANGE, version.number, listener_error
            ) from e

        try:
            if direction is Direction.UPGRADE:
                version.upgrade()
            else:
                version.rollback()
        except Exception as e:
            listener_error = self._report(
                Event(EventType.ERROR_DURING_CHANGE, version, e)
            )
            raise ChangeError(
                version.number,
                direction,
                f"{type(e).__name__}: {e}",
                listener_error,
            ) from e

        try:
            self.applier.sync_version(version.number)
        except Exception as e:
            listener_error = self._report(
                Event(EventType.ERROR_DURING_CHANGE, version, e)
            )
            raise PersistError(version.number, listener_error) from e

        self._emit(Event(EventType.AFTER_CHANGE, version))

    def _emit(self: Self, event: Event) -> None:
        """Notify the listener of an event.

        Raises:
            ListenerVetoError: If the listener fails.
        """
        try:
            self.listener.on(event)
        except Exception as e:
            number = event.version.number if event.version is not None else None
            raise ListenerVetoError(event.type, number) from e

    def _report(self: Self, event: Event) -> Exception | None:
        """Notify the listener of an error event.

        Returns:
            Exception raised by the listener, if any.
        """
        try:
            self.listener.on(event)
        except Exception as e:
            return e
        return None
