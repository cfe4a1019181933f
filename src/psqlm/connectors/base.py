"""Base connector interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from psqlm.utils.logging import get_logger

logger = get_logger(__name__)

WRITE_KEYWORDS = frozenset(
    {"INSERT", "UPDATE", "DELETE", "DROP", "ALTER", "TRUNCATE", "CREATE"}
)


def is_write_operation(sql: str) -> bool:
    """Classify a statement as a write by its first keyword."""
    tokens = sql.strip().upper().split()
    return bool(tokens) and tokens[0] in WRITE_KEYWORDS


def with_returning(sql: str) -> str:
    """Append ``RETURNING *`` to a write statement that lacks one.

    Statements already mentioning RETURNING (any case) are left as-is.
    """
    if "RETURNING" in sql.upper():
        return sql
    trimmed = sql.strip().rstrip(";").rstrip()
    return f"{trimmed} RETURNING *;"


@dataclass
class ExecutionResult:
    """Outcome of one statement execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""

    def __bool__(self) -> bool:
        return self.success


class BaseConnector(ABC):
    """Abstract base class for database gateways.

    Every call is an independent session: no transaction survives between
    calls, so a preview followed by a commit is two separate round trips.
    """

    def __init__(self, **kwargs):
        """Initialize connector.

        Args:
            **kwargs: Connector-specific configuration
        """
        self.config = kwargs
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def query(self, sql: str) -> str:
        """Run a read query in tuples-only, unaligned mode.

        Raises:
            DatabaseError: If the query fails
        """

    @abstractmethod
    def execute_capture(self, sql: str) -> ExecutionResult:
        """Run a statement and capture its output."""

    @abstractmethod
    def execute_write(self, sql: str, commit: bool) -> ExecutionResult:
        """Run a statement between BEGIN and COMMIT (or ROLLBACK)."""

    def preview_write(self, sql: str) -> ExecutionResult:
        """Run a write with RETURNING * inside a transaction that rolls back."""
        return self.execute_write(with_returning(sql), commit=False)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.config})"
