"""psqlm - A natural language interface to PostgreSQL."""

__version__ = "0.1.0"

from psqlm.agent import AssistantClient, ConversationHistory, ConversationTurn
from psqlm.connectors import ExecutionResult, PsqlConnector
from psqlm.schema import (
    Column,
    ForeignKey,
    Index,
    Schema,
    SchemaIntrospector,
    Table,
)
from psqlm.utils.config import Config, ExecutionMode, load_or_create

__all__ = [
    # Version
    "__version__",
    # Schema
    "Column",
    "ForeignKey",
    "Index",
    "Schema",
    "SchemaIntrospector",
    "Table",
    # Connectors
    "ExecutionResult",
    "PsqlConnector",
    # Agent
    "AssistantClient",
    "ConversationHistory",
    "ConversationTurn",
    # Config
    "Config",
    "ExecutionMode",
    "load_or_create",
]
