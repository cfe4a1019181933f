"""Output formatting utilities for the psqlm shell."""

from __future__ import annotations

import click


class OutputFormatter:
    """Format output for terminal display.

    Query results and diagnostics go through one place so the REPL reads
    consistently.

    Example:
        >>> out = OutputFormatter()
        >>> out.success("Transaction committed.")
        >>> out.error("Commit failed: permission denied")
    """

    @staticmethod
    def success(message: str) -> None:
        """Display success message with checkmark.

        Args:
            message: Success message to display
        """
        click.echo(f"✓ {message}")

    @staticmethod
    def error(message: str) -> None:
        """Display error message on stderr.

        Args:
            message: Error message to display
        """
        click.echo(message, err=True)

    @staticmethod
    def warning(message: str) -> None:
        """Display warning message.

        Args:
            message: Warning message to display
        """
        click.echo(f"⚠️  {message}")

    @staticmethod
    def info(message: str = "") -> None:
        click.echo(message)

    @staticmethod
    def raw(text: str) -> None:
        """Write text exactly as given (psql output already ends in newlines)."""
        if text:
            click.echo(text, nl=False)

    @staticmethod
    def cancelled() -> None:
        click.echo("Cancelled.\n")
