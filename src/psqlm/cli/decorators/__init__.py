"""CLI decorators for error handling."""

from psqlm.cli.decorators.error_handling import handle_errors

__all__ = ["handle_errors"]
