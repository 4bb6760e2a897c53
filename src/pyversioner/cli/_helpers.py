"""Console helpers for the command-line interface."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..config import CONFIG_FILE, PYPROJECT_FILE

console = Console()


def print_success(message: str, versioner: str = "default") -> None:
    """Print a success message.

    Args:
        message: Message to print.
        versioner: Name of the versioner used, shown when not the default.
    """
    suffix = f" [dim]({versioner})[/dim]" if versioner != "default" else ""
    console.print(f"[green]✓[/green] {message}{suffix}")


def print_error(message: str) -> None:
    """Print an error message.

    Args:
        message: Message to print.
    """
    console.print(f"[red]✗[/red] {escape(message)}")


def print_cause(error: BaseException) -> None:
    """Print the chain of causes of an error.

    Args:
        error: Error whose causes are printed.
    """
    cause = error.__cause__
    while cause is not None:
        detail = escape(f"{type(cause).__name__}: {cause}")
        console.print(f"  [dim]caused by {detail}[/dim]")
        cause = cause.__cause__


def print_config_help() -> None:
    """Print how to configure a versioner."""
    console.print(f"Add a {CONFIG_FILE} file:\n")
    console.print("  [dim]\\[pyversioner][/dim]")
    console.print('  [dim]versioner = "myapp.db:versioner"[/dim]\n')
    console.print(f"or a \\[tool.pyversioner] table to {PYPROJECT_FILE}.")


def configure_logging(verbose: bool) -> None:
    """Send package debug logs to the console.

    Without verbose output the logger is left as the host application set it.

    Args:
        verbose: Whether to log debug messages.
    """
    if not verbose:
        return
    logger = logging.getLogger("pyversioner")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(logging.DEBUG)
