"""Interactive read-eval-print loop."""

from __future__ import annotations

import asyncio
import signal
from pathlib import Path
from typing import Callable, Optional

try:
    import readline
except ImportError:
    # Windows has no readline; line editing and history are then unavailable
    readline = None  # type: ignore

from psqlm.agent.base import BaseAssistant
from psqlm.cli.interaction import sigint_raises
from psqlm.cli.output import OutputFormatter
from psqlm.connectors.base import BaseConnector
from psqlm.errors import PsqlmError
from psqlm.repl.commands import HELP_TEXT, handle_command
from psqlm.repl.supervisor import QuerySupervisor
from psqlm.schema.introspector import SchemaIntrospector
from psqlm.schema.types import Schema
from psqlm.utils.config import Config
from psqlm.utils.logging import get_logger
from psqlm.utils.paths import get_history_path

logger = get_logger(__name__)

PROMPT = "psqlm> "


class Shell:
    """The psqlm shell: reads lines, runs commands, supervises queries.

    Example:
        >>> shell = Shell(connector, assistant, schema, config)
        >>> asyncio.run(shell.run())
    """

    def __init__(
        self,
        connector: BaseConnector,
        assistant: BaseAssistant,
        schema: Schema,
        config: Config,
        supervisor: Optional[QuerySupervisor] = None,
        read_line: Callable[[str], str] = input,
        history_path: Optional[Path] = None,
        out: Optional[OutputFormatter] = None,
    ):
        self.connector = connector
        self.assistant = assistant
        self.config = config
        self.out = out or OutputFormatter()
        self.supervisor = supervisor or QuerySupervisor(
            connector, assistant, schema, config, out=self.out
        )
        self.supervisor.schema = schema
        self.read_line = read_line
        self.history_path = history_path

    @property
    def schema(self) -> Schema:
        return self.supervisor.schema

    def refresh_schema(self) -> Schema:
        schema = SchemaIntrospector(self.connector).introspect()
        self.supervisor.schema = schema
        return schema

    def _load_history(self) -> None:
        if readline is None or self.history_path is None:
            return
        readline.set_auto_history(False)
        try:
            readline.read_history_file(str(self.history_path))
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not load history from {self.history_path}: {e}")

    def _save_history(self) -> None:
        if readline is None or self.history_path is None:
            return
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
            readline.write_history_file(str(self.history_path))
        except OSError as e:
            logger.warning(f"Could not save history to {self.history_path}: {e}")

    async def run(self) -> None:
        """Loop until EOF or a quit command.

        Ctrl-C at the prompt, during a command, or while a query is running
        prints ``^C`` and returns to the prompt.
        """
        self._load_history()
        self.out.info(HELP_TEXT)

        try:
            with sigint_raises():
                while True:
                    try:
                        line = self.read_line(PROMPT)
                    except KeyboardInterrupt:
                        self.out.info("^C")
                        continue
                    except EOFError:
                        break

                    if not await self.handle_line(line):
                        break
        finally:
            self._save_history()

    async def handle_line(self, line: str) -> bool:
        """Process one input line. Returns False when the shell should exit."""
        line = line.strip()
        if not line:
            return True

        if readline is not None and self.history_path is not None:
            readline.add_history(line)

        if line.startswith("\\"):
            try:
                return not handle_command(self, line)
            except PsqlmError as e:
                self.out.error(f"Error: {e}")
            except KeyboardInterrupt:
                self.out.info("^C")
            return True

        try:
            await self._run_query(line)
        except PsqlmError as e:
            self.out.error(f"Error: {e}")
        except KeyboardInterrupt:
            self.out.info("^C")
        return True

    async def _run_query(self, line: str) -> None:
        """Supervise one utterance in its own task; Ctrl-C cancels that task."""
        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(self.supervisor.handle_query(line))

        try:
            loop.add_signal_handler(signal.SIGINT, task.cancel)
            watching = True
        except (NotImplementedError, RuntimeError, ValueError) as e:
            # No loop signal support (Windows, or not the main thread)
            logger.debug(f"Ctrl-C cannot cancel queries: {e}")
            watching = False

        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            self.out.info("^C")
        finally:
            if watching:
                # Puts back signal.default_int_handler
                loop.remove_signal_handler(signal.SIGINT)


def default_shell(
    connector: BaseConnector, assistant: BaseAssistant, schema: Schema, config: Config
) -> Shell:
    """Shell wired to the terminal and the persistent history file."""
    return Shell(connector, assistant, schema, config, history_path=get_history_path())
