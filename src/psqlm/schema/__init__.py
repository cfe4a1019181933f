"""Schema model and introspection."""

from psqlm.schema.introspector import SchemaIntrospector
from psqlm.schema.types import Column, ForeignKey, Index, Schema, Table

__all__ = [
    "Column",
    "ForeignKey",
    "Index",
    "Schema",
    "SchemaIntrospector",
    "Table",
]
