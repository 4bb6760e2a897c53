"""pyversioner - upgrade and roll back versioned structures.

A package for bringing a structure, such as a database schema, to a target
version by applying numbered upgrade or rollback scripts in order.
"""

from ._version import __version__
from .applier import InMemoryVersionApplier, VersionApplier
from .events import Event, EventType
from .exceptions import (
    ChangeError,
    ConfigError,
    ListenerVetoError,
    PersistError,
    ReadError,
    RollbackUnsupportedError,
    TransactionStateError,
    VersionerError,
)
from .listeners import (
    BroadcastListener,
    Listener,
    LoggingListener,
    NoOpListener,
    Transaction,
    TransactionalListener,
)
from .types import UNVERSIONED, Direction, ScriptFunc, VersionNumber
from .version import ScriptVersion, Version
from .versioner import Versioner

__all__ = [
    "UNVERSIONED",
    "BroadcastListener",
    "ChangeError",
    "ConfigError",
    "Direction",
    "Event",
    "EventType",
    "InMemoryVersionApplier",
    "Listener",
    "ListenerVetoError",
    "LoggingListener",
    "NoOpListener",
    "PersistError",
    "ReadError",
    "RollbackUnsupportedError",
    "ScriptFunc",
    "ScriptVersion",
    "Transaction",
    "TransactionStateError",
    "TransactionalListener",
    "Version",
    "VersionApplier",
    "VersionNumber",
    "Versioner",
    "VersionerError",
    "__version__",
]
