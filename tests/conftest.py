"""Shared fixtures: scripted collaborators and in-memory fakes."""

from __future__ import annotations

from typing import List, Optional, Sequence

import pytest

from psqlm.agent.base import BaseAssistant
from psqlm.connectors.base import BaseConnector, ExecutionResult
from psqlm.schema.types import Column, Schema, Table
from psqlm.utils.config import Config, ExecutionMode


class FakeConnector(BaseConnector):
    """Records every statement and answers from queued results."""

    def __init__(self, results: Optional[List[ExecutionResult]] = None):
        super().__init__()
        self.results = list(results or [])
        self.calls: List[tuple] = []

    def _next(self) -> ExecutionResult:
        if self.results:
            return self.results.pop(0)
        return ExecutionResult(True, "", "")

    def query(self, sql: str) -> str:
        self.calls.append(("query", sql))
        return self._next().stdout

    def execute_capture(self, sql: str) -> ExecutionResult:
        self.calls.append(("capture", sql))
        return self._next()

    def execute_write(self, sql: str, commit: bool) -> ExecutionResult:
        self.calls.append(("commit" if commit else "rollback", sql))
        return self._next()


class FakeAssistant(BaseAssistant):
    """Returns queued SQL strings and records the requests it received."""

    def __init__(self, replies: Optional[List[str]] = None, fixes: Optional[List[str]] = None):
        super().__init__()
        self.replies = list(replies or [])
        self.fixes = list(fixes or [])
        self.questions: List[str] = []
        self.fix_requests: List[tuple] = []

    async def text_to_sql(self, schema: Schema, question: str) -> str:
        self.questions.append(question)
        return self.replies.pop(0)

    async def fix_sql(self, schema: Schema, question: str, sql: str, error: str) -> str:
        self.fix_requests.append((question, sql, error))
        return self.fixes.pop(0)


class ScriptedPicker:
    """Answers menus from a queue of option labels (None means Esc)."""

    def __init__(self, answers: Sequence[Optional[str]] = ()):
        self.answers = list(answers)
        self.menus: List[List[str]] = []

    def pick(self, options: Sequence[str]) -> Optional[int]:
        self.menus.append(list(options))
        answer = self.answers.pop(0)
        if answer is None:
            return None
        return list(options).index(answer)


class ScriptedEditor:
    def __init__(self, edits: Sequence[str] = ()):
        self.edits = list(edits)
        self.seeds: List[str] = []

    def edit(self, sql: str) -> str:
        self.seeds.append(sql)
        return self.edits.pop(0) if self.edits else sql


class ScriptedPrompt:
    def __init__(self, lines: Sequence[str] = ()):
        self.lines = list(lines)
        self.messages: List[str] = []

    def read(self, message: str) -> str:
        self.messages.append(message)
        return self.lines.pop(0) if self.lines else ""


@pytest.fixture
def users_schema() -> Schema:
    schema = Schema()
    schema.add_table(
        Table(
            "public.users",
            columns=[
                Column("id", "integer", False, "nextval('users_id_seq'::regclass)"),
                Column("name", "text", True),
                Column("active", "boolean", False, "true"),
            ],
            primary_key=["id"],
        )
    )
    return schema


@pytest.fixture
def confirm_config() -> Config:
    return Config(api_key="sk-test", execution_mode=ExecutionMode.CONFIRM)


@pytest.fixture
def auto_config() -> Config:
    return Config(api_key="sk-test", execution_mode=ExecutionMode.AUTO)
