"""Console output helpers.

Usage:
    from routergen_cli.console import console, print_success, print_error

    print_success("Generated router file: src/generated/routers/CoreRouter.g.sol")
    print_error("Modules not found: MissingModule")
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message (green checkmark)."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message (red X) to stderr."""
    err_console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message (yellow warning sign)."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def create_table(title: str = "") -> Table:
    """Create a table, titled when a title is given."""
    return Table(title=title) if title else Table()


__all__ = [
    "console",
    "err_console",
    "print_success",
    "print_error",
    "print_warning",
    "create_table",
]
