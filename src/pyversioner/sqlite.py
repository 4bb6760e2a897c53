"""SQLite backend.

Versions are recorded as rows of a tracking table, one row per applied change,
each stamped with its modification time. The current version is the most
recently inserted row.
"""

import logging
import re
import sqlite3
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Self

from .applier import VersionApplier
from .exceptions import RollbackUnsupportedError
from .types import UNVERSIONED, VersionNumber
from .version import Version

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "version"

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_table_name(table: str) -> str:
    """Validate a table name before it is interpolated into SQL.

    Args:
        table: Table name to check.

    Returns:
        The table name.

    Raises:
        ValueError: If the name is not a plain identifier.
    """
    if not _TABLE_NAME.match(table):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


def _is_missing_table(error: sqlite3.OperationalError) -> bool:
    """Whether a SQLite error was caused by a missing table."""
    return "no such table" in str(error)


class SQLiteVersionApplier(VersionApplier):
    """Applier storing versions in a SQLite tracking table.

    The table is created by SQLiteVersioning, which should be the first version
    applied to the database.

    Attributes:
        connection: Connection to the versioned database.
        table: Name of the tracking table.
    """

    def __init__(
        self: Self, connection: sqlite3.Connection, table: str = DEFAULT_TABLE
    ) -> None:
        """Initialize the applier.

        Args:
            connection: Connection to the versioned database.
            table: Name of the tracking table.

        Raises:
            ValueError: If the table name is not a plain identifier.
        """
        self.connection = connection
        self.table = _check_table_name(table)

    def current_version(self: Self) -> VersionNumber:
        """Return the most recently recorded version.

        Returns:
            Recorded version, or -1 if the tracking table is missing or empty.
        """
        try:
            row = self.connection.execute(
                f"SELECT version FROM {self.table} "  # noqa: S608
                "ORDER BY modification_time DESC, rowid DESC LIMIT 1"
            ).fetchone()
        except sqlite3.OperationalError as e:
            if _is_missing_table(e):
                return UNVERSIONED
            raise
        if row is None:
            return UNVERSIONED
        return int(row[0])

    def sync_version(self: Self, version_nb: VersionNumber) -> None:
        """Insert a row recording the version.

        Outside of an explicit transaction the row is committed at once.
        """
        implicit = not self.connection.in_transaction
        self.connection.execute(
            f"INSERT INTO {self.table} (id, version, modification_time) "  # noqa: S608
            "VALUES (?, ?, ?)",
            (
                uuid.uuid4().hex,
                version_nb,
                datetime.now(UTC).isoformat(timespec="microseconds"),
            ),
        )
        if implicit and self.connection.in_transaction:
            self.connection.commit()


class SQLiteVersioning(Version):
    """Version creating the tracking table used by SQLiteVersionApplier.

    This change cannot be rolled back.

    Attributes:
        connection: Connection to the versioned database.
        table: Name of the tracking table.
    """

    def __init__(
        self: Self,
        connection: sqlite3.Connection,
        number: VersionNumber = 0,
        table: str = DEFAULT_TABLE,
    ) -> None:
        """Initialize the version.

        Args:
            connection: Connection to the versioned database.
            number: Version number, strongly suggested to be 0 so that it is the
                first change applied to the database.
            table: Name of the tracking table.

        Raises:
            ValueError: If the table name is not a plain identifier.
        """
        self.connection = connection
        self._number = number
        self.table = _check_table_name(table)

    @property
    def number(self: Self) -> VersionNumber:
        """Version number of this change."""
        return self._number

    def upgrade(self: Self) -> None:
        """Create the tracking table if it does not exist."""
        logger.debug("Creating version table '%s'", self.table)
        self.connection.execute(
            f"CREATE TABLE IF NOT EXISTS {self.table} ("
            "id TEXT PRIMARY KEY, "
            "version INTEGER NOT NULL, "
            "modification_time TEXT NOT NULL)"
        )

    def rollback(self: Self) -> None:
        """Refuse to drop the tracking table.

        Raises:
            RollbackUnsupportedError: Always.
        """
        raise RollbackUnsupportedError(self._number)

    def __str__(self: Self) -> str:
        """Return string representation of the version.

        Returns:
            Version number, followed by the table it creates.
        """
        return f"{self._number} (create {self.table} table)"


class SQLiteTransaction:
    """Explicit transaction on a SQLite connection.

    The connection must be in autocommit mode (``isolation_level=None``) so that
    the sqlite3 module does not manage transactions itself.
    """

    def __init__(self: Self, connection: sqlite3.Connection) -> None:
        """Begin a transaction.

        Args:
            connection: Connection in autocommit mode.
        """
        self.connection = connection
        self.connection.execute("BEGIN")

    def commit(self: Self) -> None:
        """Commit the transaction."""
        self.connection.execute("COMMIT")

    def rollback(self: Self) -> None:
        """Roll back the transaction."""
        self.connection.execute("ROLLBACK")


def sqlite_transactions(
    connection: sqlite3.Connection,
) -> Callable[[], SQLiteTransaction]:
    """Return a transaction factory for a TransactionalListener.

    Args:
        connection: Connection in autocommit mode.

    Returns:
        Callable beginning a new transaction on the connection.
    """
    return lambda: SQLiteTransaction(connection)
