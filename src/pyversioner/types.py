"""Type aliases needed in the package."""

from collections.abc import Callable
from enum import StrEnum
from typing import TypeAlias

VersionNumber: TypeAlias = int
ScriptFunc: TypeAlias = Callable[[], None]

# Recorded by appliers for structures that have never been versioned.
UNVERSIONED: VersionNumber = -1


class Direction(StrEnum):
    """Direction in which versions are applied during a sync."""

    UPGRADE = "upgrade"
    ROLLBACK = "rollback"
