"""Base classes for the SQL assistant."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, Iterator, List, Optional

from psqlm.schema.types import Schema
from psqlm.utils.logging import get_logger

logger = get_logger(__name__)

MAX_HISTORY_TURNS = 10
RESULT_SEPARATOR = "\n\n-- Result:\n"


class Role(str, Enum):
    """Speaker of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """Single chat message sent to the API."""

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class ConversationTurn:
    """A question, the SQL that answered it, and what that SQL printed."""

    question: str
    sql: str
    result: Optional[str] = None

    def to_messages(self) -> List[Message]:
        answer = self.sql
        if self.result is not None:
            answer = f"{self.sql}{RESULT_SEPARATOR}{self.result}"
        return [Message(Role.USER, self.question), Message(Role.ASSISTANT, answer)]


class ConversationHistory:
    """Bounded FIFO of successful turns; the oldest turn is evicted first."""

    def __init__(self, max_turns: int = MAX_HISTORY_TURNS):
        self.max_turns = max_turns
        self._turns: Deque[ConversationTurn] = deque()

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)
        while len(self._turns) > self.max_turns:
            evicted = self._turns.popleft()
            logger.debug(f"Evicted oldest turn: {evicted.question!r}")

    def clear(self) -> None:
        self._turns.clear()

    def to_messages(self) -> List[Message]:
        messages: List[Message] = []
        for turn in self._turns:
            messages.extend(turn.to_messages())
        return messages

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(list(self._turns))

    def __len__(self) -> int:
        return len(self._turns)

    def __repr__(self) -> str:
        return f"ConversationHistory(turns={len(self)}, max={self.max_turns})"


class BaseAssistant(ABC):
    """Abstract text-to-SQL assistant holding the conversation history."""

    def __init__(self, max_turns: int = MAX_HISTORY_TURNS):
        self.history = ConversationHistory(max_turns)
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    def add_to_history(
        self, question: str, sql: str, result: Optional[str] = None
    ) -> None:
        """Remember a turn after its SQL ran successfully."""
        self.history.append(ConversationTurn(question, sql, result))

    @abstractmethod
    async def text_to_sql(self, schema: Schema, question: str) -> str:
        """Translate a question into SQL, using the remembered turns.

        Args:
            schema: Database schema rendered into the system prompt
            question: Natural-language question

        Returns:
            Cleaned SQL text
        """

    @abstractmethod
    async def fix_sql(
        self, schema: Schema, question: str, sql: str, error: str
    ) -> str:
        """Ask for a corrected statement. Does not read or modify history.

        Args:
            schema: Database schema rendered into the system prompt
            question: Question the failing SQL was meant to answer
            sql: The failing statement
            error: Error text reported by the database

        Returns:
            Cleaned SQL text
        """
