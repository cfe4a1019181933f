"""Schema data types and prompt rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Column:
    """A table column, in ordinal position order within its table."""

    name: str
    data_type: str
    nullable: bool = True
    default: Optional[str] = None

    def render(self) -> str:
        nullable = "NULL" if self.nullable else "NOT NULL"
        default = f" DEFAULT {self.default}" if self.default is not None else ""
        return f"{self.name} {self.data_type} {nullable}{default}"


@dataclass
class ForeignKey:
    """Foreign key relationship.

    Introspection yields one single-column entry per referencing column,
    so composite keys appear as several entries.
    """

    columns: List[str]
    references_table: str
    references_columns: List[str]

    def __repr__(self) -> str:
        return (
            f"FK(({', '.join(self.columns)}) -> "
            f"{self.references_table}.{', '.join(self.references_columns)})"
        )


@dataclass
class Index:
    """Table index."""

    name: str
    columns: List[str]
    unique: bool = False


@dataclass
class Table:
    """Metadata for a single table, keyed by ``schema.table``."""

    name: str
    columns: List[Column] = field(default_factory=list)
    primary_key: Optional[List[str]] = None
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def render(self) -> str:
        """Render the table block used in the assistant prompt."""
        lines = [f"Table: {self.name}", "  Columns:"]
        lines.extend(f"    - {col.render()}" for col in self.columns)

        if self.primary_key is not None:
            lines.append(f"  Primary Key: ({', '.join(self.primary_key)})")

        if self.foreign_keys:
            lines.append("  Foreign Keys:")
            for fk in self.foreign_keys:
                lines.append(
                    f"    - ({', '.join(fk.columns)}) -> "
                    f"{fk.references_table}.{', '.join(fk.references_columns)})"
                )

        if self.indexes:
            lines.append("  Indexes:")
            for idx in self.indexes:
                unique = "UNIQUE " if idx.unique else ""
                lines.append(f"    - {unique}{idx.name} ({', '.join(idx.columns)})")

        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Table({self.name}, columns={len(self.columns)})"


@dataclass
class Schema:
    """Complete database schema.

    Tables keep insertion order so the prompt rendering is deterministic.
    """

    tables: Dict[str, Table] = field(default_factory=dict)

    def add_table(self, table: Table) -> Table:
        self.tables[table.name] = table
        return table

    def get_table(self, name: str) -> Optional[Table]:
        return self.tables.get(name)

    def __len__(self) -> int:
        return len(self.tables)

    def to_prompt_string(self) -> str:
        """Render every table followed by a blank line.

        This text is embedded verbatim in the assistant's system prompt.
        """
        return "".join(table.render() + "\n" for table in self.tables.values())
