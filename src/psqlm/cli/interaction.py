"""Terminal interaction collaborators: menu picker, SQL editor, line prompt."""

from __future__ import annotations

import signal
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

import click

from psqlm.utils.logging import get_logger

logger = get_logger(__name__)

KEY_UP = ("\x1b[A", "\x1bOA", "k")
KEY_DOWN = ("\x1b[B", "\x1bOB", "j")
KEY_ENTER = ("\r", "\n")
KEY_ESCAPE = "\x1b"

# ANSI control sequences
CLEAR_EOL = "\x1b[K"
GREEN = "\x1b[32m"
RESET = "\x1b[0m"


@contextmanager
def sigint_raises() -> Iterator[None]:
    """Let Ctrl-C raise KeyboardInterrupt while the block runs.

    ``asyncio.run`` and ``loop.add_signal_handler`` both install SIGINT
    handlers that never interrupt a blocking read such as ``input()``.
    The previous handler is restored on exit.
    """
    try:
        previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    except ValueError:
        # Handlers can only be changed from the main thread
        yield
        return

    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


class MenuPicker:
    """Arrow-key menu drawn in place below the cursor.

    Each key is read through ``click.getchar``, which puts the terminal in
    raw mode for the read and restores it before returning, also when the
    read raises.
    """

    def __init__(self, stream=None):
        self.stream = stream

    def _out(self):
        return self.stream or sys.stdout

    def _draw(self, options: Sequence[str], selected: int) -> None:
        out = self._out()
        for i, option in enumerate(options):
            if i == selected:
                out.write(f"\r  {GREEN}> {option}{RESET}{CLEAR_EOL}\n")
            else:
                out.write(f"\r    {option}{CLEAR_EOL}\n")
        # Back to the first option line so the next draw overwrites in place
        out.write(f"\x1b[{len(options)}A")
        out.flush()

    def _finish(self, options: Sequence[str]) -> None:
        out = self._out()
        out.write(f"\x1b[{len(options)}B\r")
        out.flush()

    def pick(self, options: Sequence[str]) -> Optional[int]:
        """Let the user choose an option.

        Returns:
            Index of the chosen option, or None on Esc / Ctrl-C / Ctrl-D
        """
        if not options:
            return None

        selected = 0
        self._draw(options, selected)

        try:
            while True:
                key = click.getchar()
                if key in KEY_ENTER:
                    return selected
                if key == KEY_ESCAPE:
                    return None
                if key in KEY_UP:
                    selected = max(selected - 1, 0)
                elif key in KEY_DOWN:
                    selected = min(selected + 1, len(options) - 1)
                else:
                    continue
                self._draw(options, selected)
        except (KeyboardInterrupt, EOFError):
            return None
        finally:
            self._finish(options)


class SqlEditor:
    """Edit SQL in the user's $EDITOR.

    Quitting without saving keeps the seed text, which looks the same as
    saving it unchanged.
    """

    def __init__(self, editor: Optional[str] = None):
        self.editor = editor

    def edit(self, sql: str) -> str:
        try:
            edited = click.edit(
                sql + "\n", editor=self.editor, extension=".sql", require_save=True
            )
        except click.ClickException as e:
            click.echo(f"❌ Editor failed: {e.format_message()}", err=True)
            return sql
        if edited is None:
            return sql
        return edited.rstrip()


class LinePrompt:
    """Read a single line from standard input.

    Ctrl-C and Ctrl-D read as an empty line.
    """

    def read(self, message: str) -> str:
        click.echo(message, nl=False)
        try:
            with sigint_raises():
                return input().strip()
        except KeyboardInterrupt:
            click.echo()
            return ""
        except EOFError:
            return ""
