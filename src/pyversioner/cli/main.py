"""Command-line interface for pyversioner."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from ..config import ConfigError, list_available_versioners, load_versioner
from ..exceptions import VersionerError
from ..listeners import BroadcastListener, LoggingListener, NoOpListener
from ..types import UNVERSIONED
from ..versioner import Versioner
from ._helpers import (
    configure_logging,
    console,
    print_cause,
    print_config_help,
    print_error,
    print_success,
)

app = typer.Typer(help="Upgrade and roll back versioned structures")

VersionerOption = Annotated[
    str,
    typer.Option(
        ...,
        "--versioner",
        "-n",
        help="Versioner name (for multiple versioners)",
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to config file (pyproject.toml or pyversioner.toml)",
    ),
]

VerboseOption = Annotated[
    bool,
    typer.Option(..., "--verbose", "-v", help="Log every version change"),
]


def _load(name: str, config: Path | None, verbose: bool) -> Versioner:
    configure_logging(verbose)
    versioner = load_versioner(name, config)
    if verbose:
        if isinstance(versioner.listener, NoOpListener):
            versioner.listener = LoggingListener()
        else:
            versioner.listener = BroadcastListener(
                [versioner.listener, LoggingListener()]
            )
    return versioner


def _format_version(number: int) -> str:
    return "unversioned" if number == UNVERSIONED else f"v{number}"


def _format_reached(current: int, target: int) -> str:
    # versions lying on the target are not applied, so the structure may stop short
    if current == target:
        return _format_version(current)
    return f"{_format_version(current)} (target {_format_version(target)})"


@app.command()
def status(
    versioner: VersionerOption = "default",
    config: ConfigOption = None,
) -> None:
    """Show the current and last versions of the structure."""
    try:
        mgr = _load(versioner, config, False)
        current = mgr.current_version()
        last = mgr.last_version()
        _, pending = mgr.plan(last, current)

        console.print(f"[bold]Versioner: {versioner}[/bold]\n")
        console.print(f"  Current version: {_format_version(current)}")
        console.print(f"  Last version:    {_format_version(last)}")
        if current == last:
            console.print("\n[green]Up to date[/green]")
        elif current > last:
            console.print("\n[yellow]Ahead of the last known version[/yellow]")
        else:
            console.print(f"\n[yellow]{len(pending)} version(s) pending[/yellow]")

    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except Exception as e:
        print_error(f"Status error: {e}")
        raise typer.Exit(1) from e


@app.command()
def versions(
    versioner: VersionerOption = "default",
    config: ConfigOption = None,
) -> None:
    """List the versions known to a versioner.

    A version is marked as applied when its number is at most the recorded
    version. After a rollback the recorded version is the last one rolled back,
    so that version is marked although it was reverted.
    """
    try:
        mgr = _load(versioner, config, False)
        current = mgr.current_version()

        if not mgr.versions:
            console.print("[yellow]No versions registered[/yellow]")
            return

        table = Table(title="Versions")
        table.add_column("Number", style="cyan", justify="right")
        table.add_column("Description", style="green")
        table.add_column("Applied")

        for version in sorted(mgr.versions, key=lambda v: v.number):
            description = (
                getattr(version, "description", "") or type(version).__name__
            )
            applied = "[green]✓[/green]" if version.number <= current else ""
            table.add_row(str(version.number), description, applied)

        console.print(table)
        console.print(f"\n[dim]Current version: {_format_version(current)}[/dim]")

    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except Exception as e:
        print_error(f"Listing error: {e}")
        raise typer.Exit(1) from e


@app.command()
def sync(
    to: Annotated[int, typer.Option(..., "--to", "-t", help="Target version")],
    dry_run: Annotated[
        bool,
        typer.Option(..., "--dry-run", help="Show the versions to apply and exit"),
    ] = False,
    versioner: VersionerOption = "default",
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Sync the structure to a target version."""
    try:
        mgr = _load(versioner, config, verbose)

        if dry_run:
            current = mgr.current_version()
            if current == to:
                console.print(f"Already at {_format_version(to)}")
                return

            direction, to_apply = mgr.plan(to, current)
            console.print(
                f"[bold]{direction.capitalize()} from {_format_version(current)} "
                f"to {_format_version(to)}[/bold]"
            )
            if not to_apply:
                console.print("[dim]No version to apply[/dim]")
            for version in to_apply:
                console.print(f"  • {version}")
            return

        mgr.sync(to)
        reached = _format_reached(mgr.current_version(), to)
        print_success(f"Synced to {reached}", versioner)

    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except VersionerError as e:
        print_error(f"Sync failed: {e}")
        print_cause(e)
        raise typer.Exit(1) from e
    except Exception as e:
        print_error(f"Sync error: {e}")
        raise typer.Exit(1) from e


@app.command()
def upgrade(
    versioner: VersionerOption = "default",
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Upgrade the structure to the last version."""
    try:
        mgr = _load(versioner, config, verbose)
        last = mgr.last_version()

        mgr.upgrade_to_last()
        reached = _format_reached(mgr.current_version(), last)
        print_success(f"Upgraded to {reached}", versioner)

    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except VersionerError as e:
        print_error(f"Upgrade failed: {e}")
        print_cause(e)
        raise typer.Exit(1) from e
    except Exception as e:
        print_error(f"Upgrade error: {e}")
        raise typer.Exit(1) from e


@app.command()
def versioners(
    config: ConfigOption = None,
) -> None:
    """List all available versioners from configuration."""
    try:
        available = list_available_versioners(config)

        if not available:
            console.print("[yellow]No versioners configured[/yellow]\n")
            print_config_help()
            return

        table = Table(title="Available Versioners")
        table.add_column("Name", style="cyan")
        table.add_column("Reference", style="green")

        for name, reference in sorted(available.items()):
            table.add_row(name, reference)

        console.print(table)
        console.print("\n[dim]Use with: pyversioner status --versioner <name>[/dim]")

    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
