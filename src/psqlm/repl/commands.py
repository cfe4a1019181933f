"""Backslash commands understood by the shell."""

from __future__ import annotations

from typing import TYPE_CHECKING

from psqlm.utils.config import ExecutionMode
from psqlm.utils.logging import get_logger

if TYPE_CHECKING:
    from psqlm.repl.session import Shell

logger = get_logger(__name__)

QUIT_COMMANDS = ("\\q", "\\quit")

HELP_TEXT = """Type your question in natural language, or use commands:
  \\q          - quit
  \\schema     - show/refresh schema
  \\mode [m]   - show/set execution mode (auto/confirm/show)
"""


def handle_command(shell: Shell, line: str) -> bool:
    """Run a backslash command.

    Args:
        shell: Shell whose state the command reads or changes
        line: Full input line, starting with a backslash

    Returns:
        True if the shell should exit

    Raises:
        DatabaseError: If a schema refresh fails
    """
    parts = line.split()
    cmd = parts[0] if parts else ""
    out = shell.out

    if cmd in QUIT_COMMANDS:
        return True

    if cmd == "\\schema":
        out.info("Refreshing schema...")
        schema = shell.refresh_schema()
        out.info(f"Schema loaded ({len(schema)} tables):\n")
        out.raw(schema.to_prompt_string())
    elif cmd == "\\mode":
        if len(parts) > 1:
            try:
                mode = ExecutionMode.parse(parts[1])
            except ValueError:
                out.info("Unknown mode. Use: auto, confirm, or show")
                return False
            shell.config.execution_mode = mode
            logger.debug(f"Execution mode set to {mode.value}")
            out.info(f"Execution mode: {mode.value} ({mode.description})")
        else:
            out.info(f"Current mode: {shell.config.execution_mode.value}")
    else:
        out.info(f"Unknown command: {cmd}")

    return False
