"""Tests ScriptVersion and Event."""

import dataclasses

import pytest

from pyversioner import (
    Direction,
    Event,
    EventType,
    RollbackUnsupportedError,
    ScriptVersion,
)


def test_script_version_runs_callables() -> None:
    """Test upgrade and rollback run the given callables."""
    applied: list[str] = []
    version = ScriptVersion(
        3, lambda: applied.append("up"), lambda: applied.append("down")
    )

    version.upgrade()
    version.rollback()
    assert version.number == 3  # noqa: PLR2004
    assert applied == ["up", "down"]


def test_script_version_without_rollback() -> None:
    """Test rolling back a version without rollback callable fails."""
    version = ScriptVersion(4, lambda: None)
    with pytest.raises(RollbackUnsupportedError, match="cannot rollback") as exc_info:
        version.rollback()

    assert exc_info.value.version == 4  # noqa: PLR2004
    assert exc_info.value.direction is Direction.ROLLBACK


def test_script_version_is_immutable() -> None:
    """Test a version cannot be changed once built."""
    version = ScriptVersion(1, lambda: None)
    with pytest.raises(dataclasses.FrozenInstanceError):
        version.version_number = 2  # type: ignore[misc]


def test_script_version_str() -> None:
    """Test string representation of versions."""
    assert str(ScriptVersion(1, lambda: None)) == "1"
    assert str(ScriptVersion(2, lambda: None, description="users")) == "2 (users)"


def test_event_type_values() -> None:
    """Test event type values listeners key on."""
    assert [str(event_type) for event_type in EventType] == [
        "start",
        "end",
        "before-sync",
        "after-sync",
        "before-change",
        "after-change",
        "error-during-change",
        "error",
    ]


def test_event_str() -> None:
    """Test string representation of events."""
    version = ScriptVersion(5, lambda: None)
    assert str(Event(EventType.START)) == "start"
    assert str(Event(EventType.BEFORE_CHANGE, version)) == "before-change (version 5)"
