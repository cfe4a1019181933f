"""Classify user input as raw SQL or natural language."""

from __future__ import annotations

import logging

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from psqlm.connectors.base import is_write_operation
from psqlm.utils.logging import get_logger

logger = get_logger(__name__)

# sqlglot warns on every statement it can only keep as an opaque Command
get_logger("sqlglot").setLevel(logging.ERROR)

SQL_STARTERS = (
    "SELECT",
    "INSERT",
    "UPDATE",
    "DELETE",
    "CREATE",
    "DROP",
    "ALTER",
    "TRUNCATE",
    "WITH",
    "EXPLAIN",
    "ANALYZE",
    "BEGIN",
    "COMMIT",
    "ROLLBACK",
    "SET",
    "GRANT",
    "REVOKE",
    "COPY",
    "VACUUM",
    "REINDEX",
)


def starts_with_sql_keyword(text: str) -> bool:
    """Leading keyword check: a starter followed by whitespace, '(' or ';'."""
    upper = text.strip().upper()
    for keyword in SQL_STARTERS:
        if upper.startswith(keyword) and len(upper) > len(keyword):
            follower = upper[len(keyword)]
            if follower.isspace() or follower in "(;":
                return True
    return False


def _has_required_clauses(statement: exp.Expression) -> bool:
    # Command is the fallback for text sqlglot could not parse
    if isinstance(statement, exp.Command):
        return False
    # PostgreSQL requires DELETE FROM and UPDATE ... SET; sqlglot also
    # accepts the bare MySQL-style forms
    if isinstance(statement, exp.Delete):
        return statement.args.get("this") is not None
    if isinstance(statement, exp.Update):
        return bool(statement.args.get("expressions"))
    return True


def parses_as_postgres(text: str) -> bool:
    try:
        statements = sqlglot.parse(text, read="postgres")
    except SqlglotError as e:
        logger.debug(f"Not parseable as SQL: {e}")
        return False

    statements = [s for s in statements if s is not None]
    return bool(statements) and all(_has_required_clauses(s) for s in statements)


def is_raw_sql(text: str) -> bool:
    """True when the text both starts like SQL and parses as PostgreSQL.

    Prose that happens to parse ("SELECT the best option") counts as SQL.
    """
    return starts_with_sql_keyword(text) and parses_as_postgres(text)


__all__ = [
    "SQL_STARTERS",
    "is_raw_sql",
    "is_write_operation",
    "parses_as_postgres",
    "starts_with_sql_keyword",
]
