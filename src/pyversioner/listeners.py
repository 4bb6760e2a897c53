"""Listeners reacting to events raised during version syncing.

A listener vetoes a sync by raising from ``on``: the versioner stops at once and
reports the failure to its caller.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Protocol, Self

from .events import Event, EventType
from .exceptions import TransactionStateError

logger = logging.getLogger("pyversioner")


class Listener(ABC):
    """Reacts to events raised during version syncing."""

    @abstractmethod
    def on(self: Self, event: Event) -> None:
        """Handle an event.

        Args:
            event: The event being raised.

        Raises:
            Exception: Any exception aborts the sync in progress.
        """


class NoOpListener(Listener):
    """Listener that ignores every event."""

    def on(self: Self, event: Event) -> None:
        """Do nothing."""


class BroadcastListener(Listener):
    """Forwards events to several listeners, in order.

    The first listener raising stops the broadcast: later listeners do not see
    the event.

    Attributes:
        listeners: Listeners events are forwarded to.
    """

    def __init__(self: Self, listeners: Iterable[Listener] = ()) -> None:
        """Initialize the broadcast listener.

        Args:
            listeners: Listeners to forward events to.
        """
        self.listeners: list[Listener] = list(listeners)

    def add(self: Self, listener: Listener) -> None:
        """Append a listener to the broadcast.

        Args:
            listener: Listener to append.
        """
        self.listeners.append(listener)

    def on(self: Self, event: Event) -> None:
        """Forward the event to each listener."""
        for listener in self.listeners:
            listener.on(event)


class LoggingListener(Listener):
    """Logs the progress of a sync.

    Only sync boundaries and version changes are logged. This listener never
    raises.
    """

    def __init__(
        self: Self, log: logging.Logger | None = None, level: int = logging.DEBUG
    ) -> None:
        """Initialize the logging listener.

        Args:
            log: Logger to use, defaults to the package logger.
            level: Level to log at.
        """
        self.logger = log or logger
        self.level = level

    def on(self: Self, event: Event) -> None:
        """Log the event if it is a sync boundary or a version change."""
        match event.type:
            case EventType.BEFORE_SYNC:
                self.logger.log(self.level, "starting syncing process")
            case EventType.BEFORE_CHANGE if event.version is not None:
                self.logger.log(
                    self.level, "applying version %d", event.version.number
                )
            case EventType.AFTER_CHANGE if event.version is not None:
                self.logger.log(self.level, "version %d applied", event.version.number)
            case EventType.AFTER_SYNC:
                self.logger.log(self.level, "end of syncing process")


class Transaction(Protocol):
    """An open transaction on the versioned structure."""

    def commit(self: Self) -> None:
        """Make the changes done in the transaction durable."""
        ...

    def rollback(self: Self) -> None:
        """Discard the changes done in the transaction."""
        ...


class TransactionalListener(Listener):
    """Wraps each version change in its own transaction.

    A transaction is opened before each change, committed after it and rolled
    back when it fails or is vetoed. When the applier records versions through the same
    connection, the change and its record are committed together.

    Example:
        >>> connection = sqlite3.connect("app.db", isolation_level=None)
        >>> versioner.listener = TransactionalListener(
        ...     sqlite_transactions(connection)
        ... )
    """

    def __init__(self: Self, begin: Callable[[], Transaction]) -> None:
        """Initialize the transactional listener.

        Args:
            begin: Opens a new transaction.
        """
        self.begin = begin
        self._transaction: Transaction | None = None

    @property
    def in_transaction(self: Self) -> bool:
        """Whether a transaction is currently open."""
        return self._transaction is not None

    def on(self: Self, event: Event) -> None:
        """Open, commit or roll back the transaction of the current change.

        Raises:
            TransactionStateError: If events arrive out of sequence.
        """
        match event.type:
            case EventType.BEFORE_CHANGE:
                if self._transaction is not None:
                    raise TransactionStateError(
                        "cannot begin a transaction while another one is open"
                    )
                self._transaction = self.begin()
            case EventType.AFTER_CHANGE:
                self._take_transaction().commit()
            case EventType.ERROR_DURING_CHANGE:
                # the change may have been vetoed before its transaction began
                if self._transaction is not None:
                    self._take_transaction().rollback()

    def _take_transaction(self: Self) -> Transaction:
        """Return the open transaction and forget it.

        Raises:
            TransactionStateError: If no transaction is open.
        """
        transaction = self._transaction
        if transaction is None:
            raise TransactionStateError("no transaction is open")
        self._transaction = None
        return transaction
