"""Shared rich consoles for user-facing output."""

from rich.console import Console

console = Console()

# Log records go to stderr so --json output on stdout stays parseable
err_console = Console(stderr=True)
