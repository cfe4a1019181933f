"""Per-utterance supervision: propose, confirm, execute, preview, repair."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from psqlm.agent.base import BaseAssistant
from psqlm.cli.interaction import LinePrompt, MenuPicker, SqlEditor
from psqlm.cli.output import OutputFormatter
from psqlm.connectors.base import BaseConnector, is_write_operation
from psqlm.errors import AssistantError
from psqlm.repl.classify import is_raw_sql
from psqlm.schema.types import Schema
from psqlm.utils.config import Config, ExecutionMode
from psqlm.utils.logging import get_logger

logger = get_logger(__name__)

NEW_PROMPT_MESSAGE = "Enter new prompt: "


class RunChoice(Enum):
    RUN = "Run"
    EDIT_SQL = "Edit SQL"
    EDIT_PROMPT = "Edit prompt"
    AUTO_RUN = "Always run (auto-mode)"
    CANCEL = "Cancel"


class CommitAction(Enum):
    COMMIT = "Commit transaction"
    ROLLBACK = "Rollback (discard changes)"
    EDIT = "Edit SQL and retry"


class Outcome(Enum):
    """How an execution attempt ended."""

    DONE = "done"
    EDIT = "edit"
    FAILED = "failed"


class ErrorAction(Enum):
    FIX = "Ask assistant to fix"
    EDIT = "Edit SQL manually"
    RETRY = "Retry with different prompt"
    CANCEL = "Cancel"


RUN_MENU = [RunChoice.RUN, RunChoice.EDIT_SQL, RunChoice.EDIT_PROMPT, RunChoice.AUTO_RUN]
COMMIT_MENU = [CommitAction.COMMIT, CommitAction.ROLLBACK, CommitAction.EDIT]
ERROR_MENU = [ErrorAction.FIX, ErrorAction.EDIT, ErrorAction.RETRY, ErrorAction.CANCEL]

def _require_sql(sql: str) -> str:
    if not sql:
        raise AssistantError("Assistant returned no SQL")
    return sql


class QuerySupervisor:
    """Drive one utterance from question to executed (or abandoned) SQL.

    Conversation history is only appended after a statement succeeds;
    writes are previewed inside a rolled-back transaction and committed only
    on explicit confirmation.
    """

    def __init__(
        self,
        connector: BaseConnector,
        assistant: BaseAssistant,
        schema: Schema,
        config: Config,
        picker: Optional[MenuPicker] = None,
        editor: Optional[SqlEditor] = None,
        prompt: Optional[LinePrompt] = None,
        out: Optional[OutputFormatter] = None,
    ):
        self.connector = connector
        self.assistant = assistant
        self.schema = schema
        self.config = config
        self.picker = picker or MenuPicker()
        self.editor = editor or SqlEditor()
        self.prompt = prompt or LinePrompt()
        self.out = out or OutputFormatter()

    # ------------------------------------------------------------------
    # Menus

    def _choose(self, menu):
        index = self.picker.pick([item.value for item in menu])
        if index is None or not 0 <= index < len(menu):
            return None
        return menu[index]

    def confirm_execution(self) -> RunChoice:
        choice = self._choose(RUN_MENU) or RunChoice.CANCEL
        if choice is RunChoice.AUTO_RUN:
            self.config.execution_mode = ExecutionMode.AUTO
            logger.debug("Execution mode switched to auto from menu")
            self.out.info("Auto-run enabled. Use \\mode confirm to disable.\n")
        return choice

    def prompt_commit_action(self) -> CommitAction:
        return self._choose(COMMIT_MENU) or CommitAction.ROLLBACK

    def prompt_error_action(self) -> ErrorAction:
        return self._choose(ERROR_MENU) or ErrorAction.CANCEL

    # ------------------------------------------------------------------
    # Utterance

    async def handle_query(self, question: str) -> None:
        """Handle one natural-language or raw-SQL utterance."""
        current_question = question
        current_sql: Optional[str] = None
        raw = False

        if is_raw_sql(question):
            current_sql = question
            raw = True

        while True:
            if current_sql is None:
                self.out.info()
                current_sql = await self.assistant.text_to_sql(
                    self.schema, current_question
                )
                raw = False
                _require_sql(current_sql)

            if raw:
                await self.execute_with_recovery(current_question, current_sql)
                return

            mode = self.config.execution_mode
            if mode is ExecutionMode.SHOW:
                return

            if mode is ExecutionMode.CONFIRM:
                choice = self.confirm_execution()
                if choice is RunChoice.EDIT_SQL:
                    current_sql = self.editor.edit(current_sql)
                    continue
                if choice is RunChoice.EDIT_PROMPT:
                    new_question = self.prompt.read(NEW_PROMPT_MESSAGE)
                    if not new_question:
                        self.out.cancelled()
                        return
                    current_question = new_question
                    current_sql = None
                    continue
                if choice is RunChoice.CANCEL:
                    self.out.cancelled()
                    return

            await self.execute_with_recovery(current_question, current_sql)
            return

    # ------------------------------------------------------------------
    # Execution

    async def execute_with_recovery(self, question: str, sql: str) -> None:
        """Execute until success, commit/rollback, or the user gives up.

        Repairs replace the SQL only; every attempt, and the turn recorded on
        success, keeps the originating question.
        """
        while True:
            if is_write_operation(sql):
                outcome, stderr = self._execute_write(question, sql)
            else:
                outcome, stderr = self._execute_read(question, sql)

            if outcome is Outcome.DONE:
                return
            if outcome is Outcome.EDIT:
                sql = self.editor.edit(sql)
                self.out.info()
                continue

            repaired = await self.recover(question, sql, stderr)
            if not repaired:
                return
            sql = repaired

    def _execute_read(self, question: str, sql: str) -> Tuple[Outcome, str]:
        self.out.info()
        result = self.connector.execute_capture(sql)
        self.out.raw(result.stdout)

        if result.success:
            self.assistant.add_to_history(question, sql, result.stdout)
            self.out.info()
            return Outcome.DONE, ""

        self.out.error(result.stderr)
        self.out.info()
        return Outcome.FAILED, result.stderr

    def _execute_write(self, question: str, sql: str) -> Tuple[Outcome, str]:
        """Preview, then commit, roll back, or ask for an edit.

        Returns:
            (outcome, stderr); stderr is only set when the preview failed
        """
        self.out.info()
        self.out.warning(
            "This is a WRITE operation. Previewing in a transaction (will rollback)...\n"
        )

        preview = self.connector.preview_write(sql)
        if not preview.success:
            self.out.error(preview.stderr)
            self.out.info()
            return Outcome.FAILED, preview.stderr

        if preview.stdout:
            self.out.info("Rows that will be affected:")
            self.out.raw(preview.stdout)

        self.out.info("\n(Preview complete - changes were rolled back)")
        action = self.prompt_commit_action()

        if action is CommitAction.EDIT:
            return Outcome.EDIT, ""

        if action is CommitAction.ROLLBACK:
            self.out.info("Transaction rolled back.\n")
            return Outcome.DONE, ""

        result = self.connector.execute_write(sql, commit=True)
        if result.success:
            self.out.success("Transaction committed.\n")
            self.out.raw(result.stdout)
            self.assistant.add_to_history(question, sql, result.stdout)
        else:
            self.out.error(f"Commit failed: {result.stderr}")
        return Outcome.DONE, ""

    # ------------------------------------------------------------------
    # Repair

    async def recover(self, question: str, sql: str, error: str) -> Optional[str]:
        """Error-action menu. Returns the next SQL to try, or None to stop."""
        action = self.prompt_error_action()

        if action is ErrorAction.FIX:
            return await self.ask_to_fix(question, sql, error)

        if action is ErrorAction.EDIT:
            edited = self.editor.edit(sql)
            self.out.info()
            return edited

        if action is ErrorAction.RETRY:
            return await self.prompt_new_question()

        self.out.cancelled()
        return None

    async def _confirm_candidate(self, sql: str) -> Optional[str]:
        """Run/Edit loop over a proposed repair; None means cancel."""
        if not sql:
            self.out.cancelled()
            return None

        while True:
            choice = self.confirm_execution()
            if choice in (RunChoice.RUN, RunChoice.AUTO_RUN):
                return sql
            if choice is RunChoice.EDIT_SQL:
                sql = self.editor.edit(sql)
                continue
            self.out.cancelled()
            return None

    async def ask_to_fix(
        self, question: str, sql: str, error: str
    ) -> Optional[str]:
        self.out.info("-- Fixed SQL:")
        fixed = await self.assistant.fix_sql(self.schema, question, sql, error)
        return await self._confirm_candidate(fixed)

    async def prompt_new_question(self) -> Optional[str]:
        """SQL for a rephrased question; the rephrasing is not recorded."""
        new_question = self.prompt.read(NEW_PROMPT_MESSAGE)
        if not new_question:
            self.out.cancelled()
            return None

        self.out.info("\n")
        new_sql = await self.assistant.text_to_sql(self.schema, new_question)
        return await self._confirm_candidate(new_sql)
