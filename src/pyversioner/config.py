"""Versioner configuration loading.

Versioners are referenced as ``module:attribute`` strings, either in a
``pyversioner.toml`` file:

```toml
[pyversioner]
versioner = "myapp.db:versioner"

[pyversioner.versioners]
analytics = "myapp.analytics:build_versioner"
```

or under ``[tool.pyversioner]`` in ``pyproject.toml``. The attribute is either a
Versioner or a callable taking no argument and returning one.
"""

import importlib
import sys
import tomllib
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .versioner import Versioner

CONFIG_FILE = "pyversioner.toml"
PYPROJECT_FILE = "pyproject.toml"
DEFAULT_VERSIONER = "default"


class VersionerSettings(BaseModel):
    """Validated content of the pyversioner configuration table.

    Attributes:
        versioner: Reference to the default versioner.
        versioners: References to named versioners.
    """

    model_config = ConfigDict(extra="forbid")

    versioner: str | None = None
    versioners: dict[str, str] = Field(default_factory=dict)

    @field_validator("versioner")
    @classmethod
    def check_default_reference(cls, value: str | None) -> str | None:
        if value is not None:
            _check_reference(value)
        return value

    @field_validator("versioners")
    @classmethod
    def check_named_references(cls, value: dict[str, str]) -> dict[str, str]:
        for reference in value.values():
            _check_reference(reference)
        return value

    def references(self: Self) -> dict[str, str]:
        """Return every configured versioner reference by name.

        Returns:
            Mapping of versioner names to ``module:attribute`` references, the
            default versioner being named "default".
        """
        available = dict(self.versioners)
        if self.versioner is not None:
            available[DEFAULT_VERSIONER] = self.versioner
        return available


def _check_reference(reference: str) -> None:
    module, sep, attribute = reference.partition(":")
    if not sep or not module or not attribute:
        raise ValueError(
            f"Invalid versioner reference '{reference}', "
            "expected format 'module:attribute'"
        )


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the configuration file in a directory.

    A ``pyversioner.toml`` file wins over a ``pyproject.toml`` file, which is
    only used when it has a ``[tool.pyversioner]`` table.

    Args:
        start: Directory to look in. Defaults to the current directory.

    Returns:
        Path to the configuration file, or None if there is none.
    """
    directory = start or Path.cwd()

    config_file = directory / CONFIG_FILE
    if config_file.is_file():
        return config_file

    pyproject = directory / PYPROJECT_FILE
    if pyproject.is_file():
        try:
            content = tomllib.loads(pyproject.read_text())
        except tomllib.TOMLDecodeError:
            return None
        if "pyversioner" in content.get("tool", {}):
            return pyproject

    return None


def load_config(config_path: Path | None = None) -> VersionerSettings:
    """Load the versioner configuration.

    Args:
        config_path: Configuration file to read. Searched in the current
            directory when not provided.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If no configuration is found or it is invalid.
    """
    path = config_path or find_config_file()
    if path is None:
        raise ConfigError(
            f"No configuration found: create {CONFIG_FILE} or add a "
            f"[tool.pyversioner] table to {PYPROJECT_FILE}"
        )

    try:
        content = tomllib.loads(path.read_text())
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    table: Any
    if path.name == PYPROJECT_FILE:
        table = content.get("tool", {}).get("pyversioner")
    else:
        table = content.get("pyversioner")
    if not isinstance(table, dict):
        raise ConfigError(f"No pyversioner configuration in {path}")

    try:
        return VersionerSettings.model_validate(table)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def list_available_versioners(config_path: Path | None = None) -> dict[str, str]:
    """List configured versioners.

    Args:
        config_path: Configuration file to read.

    Returns:
        Mapping of versioner names to their references. Empty when there is no
        configuration file.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    if config_path is None and find_config_file() is None:
        return {}
    return load_config(config_path).references()


def load_versioner(
    name: str = DEFAULT_VERSIONER, config_path: Path | None = None
) -> Versioner:
    """Import a configured versioner.

    Args:
        name: Name of the versioner.
        config_path: Configuration file to read.

    Returns:
        The versioner.

    Raises:
        ConfigError: If the versioner is not configured or cannot be imported.
    """
    references = load_config(config_path).references()
    if name not in references:
        available = ", ".join(sorted(references)) or "none"
        raise ConfigError(f"Versioner '{name}' not found (available: {available})")

    module_name, _, attribute = references[name].partition(":")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import module '{module_name}': {e}") from e

    try:
        target = getattr(module, attribute)
    except AttributeError as e:
        raise ConfigError(
            f"Module '{module_name}' has no attribute '{attribute}'"
        ) from e

    if not isinstance(target, Versioner) and callable(target):
        target = target()
    if not isinstance(target, Versioner):
        raise ConfigError(
            f"'{references[name]}' is not a Versioner (got {type(target).__name__})"
        )
    return target
