"""Exceptions raised while synchronizing structure versions."""

from typing import Self

from .types import Direction, VersionNumber


class VersionerError(Exception):
    """Base exception for all versioner errors."""


class _ListenerAwareError(VersionerError):
    """Error that may also carry the failure of the listener reporting it."""

    def __init__(self: Self, message: str, listener_error: Exception | None) -> None:
        self.listener_error = listener_error
        if listener_error is not None:
            message = f"{message} (event error: {listener_error})"
        super().__init__(message)


class ReadError(_ListenerAwareError):
    """Raised when the current version cannot be read from the applier.

    Attributes:
        listener_error: Exception raised by the listener while the failure was
            being reported, if any.
    """

    def __init__(self: Self, listener_error: Exception | None = None) -> None:
        """Initialize the error.

        Args:
            listener_error: Exception raised by the listener on the error event.
        """
        super().__init__(
            "could not sync: unable to read current version", listener_error
        )


class ChangeError(_ListenerAwareError):
    """Raised when a version upgrade or rollback action fails.

    Attributes:
        version: Number of the version whose action failed.
        direction: Whether the version was being upgraded or rolled back.
        listener_error: Exception raised by the listener while the failure was
            being reported, if any.
    """

    def __init__(
        self: Self,
        version: VersionNumber,
        direction: Direction,
        reason: str | None = None,
        listener_error: Exception | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            version: Number of the failing version.
            direction: Direction of the failing action.
            reason: Optional description of the failure.
            listener_error: Exception raised by the listener on the error event.
        """
        self.version = version
        self.direction = direction
        message = f"{direction} to version {version}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, listener_error)


class RollbackUnsupportedError(ChangeError):
    """Raised by a version that has no meaningful inverse change."""

    def __init__(self: Self, version: VersionNumber) -> None:
        """Initialize the error.

        Args:
            version: Number of the version that cannot be rolled back.
        """
        super().__init__(version, Direction.ROLLBACK, "cannot rollback this change")


class PersistError(_ListenerAwareError):
    """Raised when a new version cannot be recorded after a successful change.

    The structure has been changed but its recorded version has not, so the
    caller must reconcile them, for instance by recording the version again.

    Attributes:
        version: Number of the version that could not be recorded.
        listener_error: Exception raised by the listener while the failure was
            being reported, if any.
    """

    def __init__(
        self: Self, version: VersionNumber, listener_error: Exception | None = None
    ) -> None:
        """Initialize the error.

        Args:
            version: Number of the version that could not be recorded.
            listener_error: Exception raised by the listener on the error event.
        """
        self.version = version
        super().__init__(f"sync version to {version}", listener_error)


class ListenerVetoError(_ListenerAwareError):
    """Raised when a listener aborts a sync by failing on an event.

    The listener's exception is chained as ``__cause__``.

    Attributes:
        event_type: Type of the event the listener failed on.
        version: Number of the version carried by the event, if any.
        listener_error: Exception raised by the listener while the veto of a
            change was being reported, if any.
    """

    def __init__(
        self: Self,
        event_type: str,
        version: VersionNumber | None = None,
        listener_error: Exception | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            event_type: Type of the vetoed event.
            version: Version number carried by the event.
            listener_error: Exception raised by the listener on the error event.
        """
        self.event_type = event_type
        self.version = version
        message = f"event {event_type}"
        if version is not None:
            message = f"{message} (version {version})"
        super().__init__(message, listener_error)


class TransactionStateError(VersionerError):
    """Raised when a transactional listener receives events out of sequence."""


class ConfigError(VersionerError):
    """Raised when versioner configuration cannot be loaded."""
