"""Schema introspection from PostgreSQL catalogs."""

from __future__ import annotations

from typing import Dict, Iterator, List

from psqlm.connectors.base import BaseConnector
from psqlm.schema.types import Column, ForeignKey, Index, Schema, Table
from psqlm.utils.logging import get_logger

logger = get_logger(__name__)

SYSTEM_SCHEMAS = ("pg_catalog", "information_schema", "pg_toast")
_EXCLUDED = ", ".join(f"'{s}'" for s in SYSTEM_SCHEMAS)

COLUMNS_SQL = f"""
    SELECT
        table_schema || '.' || table_name,
        column_name,
        data_type,
        is_nullable,
        column_default
    FROM information_schema.columns
    WHERE table_schema NOT IN ({_EXCLUDED})
    ORDER BY table_schema, table_name, ordinal_position
"""

PRIMARY_KEYS_SQL = f"""
    SELECT
        tc.table_schema || '.' || tc.table_name,
        kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
        ON tc.constraint_name = kcu.constraint_name
        AND tc.table_schema = kcu.table_schema
    WHERE tc.constraint_type = 'PRIMARY KEY'
    AND tc.table_schema NOT IN ({_EXCLUDED})
    ORDER BY tc.table_schema, tc.table_name, kcu.ordinal_position
"""

FOREIGN_KEYS_SQL = f"""
    SELECT
        tc.table_schema || '.' || tc.table_name,
        kcu.column_name,
        ccu.table_schema || '.' || ccu.table_name AS foreign_table_name,
        ccu.column_name AS foreign_column_name
    FROM information_schema.table_constraints AS tc
    JOIN information_schema.key_column_usage AS kcu
        ON tc.constraint_name = kcu.constraint_name
        AND tc.table_schema = kcu.table_schema
    JOIN information_schema.constraint_column_usage AS ccu
        ON ccu.constraint_name = tc.constraint_name
        AND ccu.table_schema = tc.table_schema
    WHERE tc.constraint_type = 'FOREIGN KEY'
    AND tc.table_schema NOT IN ({_EXCLUDED})
"""

INDEXES_SQL = f"""
    SELECT
        schemaname || '.' || tablename,
        indexname,
        indexdef
    FROM pg_indexes
    WHERE schemaname NOT IN ({_EXCLUDED})
"""


def _rows(output: str, min_fields: int) -> Iterator[List[str]]:
    """Split ``psql -t -A`` output into trimmed pipe-separated fields."""
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = [part.strip() for part in line.split("|")]
        if len(parts) >= min_fields:
            yield parts


def parse_index_columns(index_def: str) -> List[str]:
    """Extract the column list between the last '(' and the last ')'."""
    start = index_def.rfind("(")
    end = index_def.rfind(")")
    if start == -1 or end == -1 or end < start:
        return []
    return [col.strip() for col in index_def[start + 1 : end].split(",")]


class SchemaIntrospector:
    """Build a Schema from four catalog queries.

    Example:
        >>> introspector = SchemaIntrospector(connector)
        >>> schema = introspector.introspect()
        >>> print(schema.to_prompt_string())
    """

    def __init__(self, connector: BaseConnector):
        self.connector = connector

    def introspect(self) -> Schema:
        """Query the catalogs and assemble the schema.

        Raises:
            DatabaseError: If any catalog query fails
        """
        schema = Schema()

        self._load_columns(schema)
        self._load_primary_keys(schema)
        self._load_foreign_keys(schema)
        self._load_indexes(schema)

        logger.info(f"Introspected {len(schema)} tables")
        return schema

    def _load_columns(self, schema: Schema) -> None:
        for parts in _rows(self.connector.query(COLUMNS_SQL), 4):
            table_name = parts[0]
            default = parts[4] if len(parts) > 4 and parts[4] else None
            column = Column(
                name=parts[1],
                data_type=parts[2],
                nullable=parts[3] == "YES",
                default=default,
            )
            table = schema.get_table(table_name) or schema.add_table(Table(table_name))
            table.columns.append(column)

    def _load_primary_keys(self, schema: Schema) -> None:
        pk_map: Dict[str, List[str]] = {}
        for parts in _rows(self.connector.query(PRIMARY_KEYS_SQL), 2):
            pk_map.setdefault(parts[0], []).append(parts[1])

        for table_name, columns in pk_map.items():
            table = schema.get_table(table_name)
            if table is not None:
                table.primary_key = columns

    def _load_foreign_keys(self, schema: Schema) -> None:
        for parts in _rows(self.connector.query(FOREIGN_KEYS_SQL), 4):
            table = schema.get_table(parts[0])
            if table is None:
                continue
            table.foreign_keys.append(
                ForeignKey(
                    columns=[parts[1]],
                    references_table=parts[2],
                    references_columns=[parts[3]],
                )
            )

    def _load_indexes(self, schema: Schema) -> None:
        for parts in _rows(self.connector.query(INDEXES_SQL), 3):
            table = schema.get_table(parts[0])
            if table is None:
                continue
            # Substring match: an index or column named with UNIQUE also matches
            index_def = parts[2]
            table.indexes.append(
                Index(
                    name=parts[1],
                    columns=parse_index_columns(index_def),
                    unique="UNIQUE" in index_def,
                )
            )
