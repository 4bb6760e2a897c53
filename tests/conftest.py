"""Shared fixtures for the test suite."""

from collections.abc import Callable, Iterable
from typing import Any, Self

import pytest

from pyversioner import (
    Event,
    EventType,
    Listener,
    Version,
    VersionApplier,
    Versioner,
)

Call = tuple[Any, ...]


class RecordingVersion(Version):
    """Version recording its actions in a shared call log."""

    def __init__(
        self: Self,
        number: int,
        calls: list[Call],
        fail_upgrade: bool = False,
        fail_rollback: bool = False,
    ) -> None:
        self._number = number
        self.calls = calls
        self.fail_upgrade = fail_upgrade
        self.fail_rollback = fail_rollback

    @property
    def number(self: Self) -> int:
        return self._number

    def upgrade(self: Self) -> None:
        self.calls.append(("upgrade", self._number))
        if self.fail_upgrade:
            raise RuntimeError(f"upgrade {self._number} exploded")

    def rollback(self: Self) -> None:
        self.calls.append(("rollback", self._number))
        if self.fail_rollback:
            raise RuntimeError(f"rollback {self._number} exploded")


class RecordingApplier(VersionApplier):
    """Applier recording reads and writes in a shared call log."""

    def __init__(self: Self, calls: list[Call], current: int = -1) -> None:
        self.calls = calls
        self.current = current
        self.fail_read = False
        self.fail_sync_on: set[int] = set()

    def current_version(self: Self) -> int:
        self.calls.append(("current",))
        if self.fail_read:
            raise ConnectionError("database unreachable")
        return self.current

    def sync_version(self: Self, version_nb: int) -> None:
        self.calls.append(("sync", version_nb))
        if version_nb in self.fail_sync_on:
            raise ConnectionError(f"cannot record {version_nb}")
        self.current = version_nb


class RecordingListener(Listener):
    """Listener recording events, optionally failing on some event types."""

    def __init__(
        self: Self, calls: list[Call] | None = None, fail_on: Iterable[EventType] = ()
    ) -> None:
        self.events: list[Event] = []
        self.calls = calls
        self.fail_on = set(fail_on)

    def on(self: Self, event: Event) -> None:
        self.events.append(event)
        if self.calls is not None:
            number = event.version.number if event.version is not None else None
            self.calls.append(("event", str(event.type), number))
        if event.type in self.fail_on:
            raise ValueError(f"listener refused {event.type}")

    @property
    def types(self: Self) -> list[EventType]:
        return [event.type for event in self.events]


@pytest.fixture
def calls() -> list[Call]:
    """Call log shared by recording collaborators."""
    return []


@pytest.fixture
def applier(calls: list[Call]) -> RecordingApplier:
    """Recording applier on an unversioned structure."""
    return RecordingApplier(calls)


@pytest.fixture
def make_versions(calls: list[Call]) -> Callable[..., list[RecordingVersion]]:
    """Factory building recording versions from numbers."""

    def factory(*numbers: int) -> list[RecordingVersion]:
        return [RecordingVersion(number, calls) for number in numbers]

    return factory


@pytest.fixture
def listener() -> RecordingListener:
    """Recording listener that never fails."""
    return RecordingListener()


@pytest.fixture
def versioner(
    applier: RecordingApplier,
    make_versions: Callable[..., list[RecordingVersion]],
    listener: RecordingListener,
) -> Versioner:
    """Versioner holding versions 0, 1, 2 and 3 out of order."""
    return Versioner(applier, make_versions(2, 0, 3, 1), listener)


def actions(calls: list[Call]) -> list[Call]:
    """Keep only version actions and version records from a call log."""
    return [call for call in calls if call[0] in {"upgrade", "rollback", "sync"}]
