"""SQL assistant module for psqlm."""

from psqlm.agent.base import (
    BaseAssistant,
    ConversationHistory,
    ConversationTurn,
    Message,
    Role,
)
from psqlm.agent.client import AssistantClient
from psqlm.agent.prompts import clean_sql

__all__ = [
    "AssistantClient",
    "BaseAssistant",
    "ConversationHistory",
    "ConversationTurn",
    "Message",
    "Role",
    "clean_sql",
]
