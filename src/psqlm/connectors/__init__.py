"""Database connectors for psqlm."""

from psqlm.connectors.base import (
    BaseConnector,
    ExecutionResult,
    is_write_operation,
    with_returning,
)
from psqlm.connectors.psql_connector import PsqlConnector

__all__ = [
    "BaseConnector",
    "ExecutionResult",
    "PsqlConnector",
    "is_write_operation",
    "with_returning",
]
