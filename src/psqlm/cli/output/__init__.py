"""Terminal output helpers."""

from psqlm.cli.output.formatters import OutputFormatter

__all__ = ["OutputFormatter"]
