"""Interactive shell and query supervision."""

from psqlm.repl.classify import is_raw_sql, is_write_operation
from psqlm.repl.session import Shell
from psqlm.repl.supervisor import QuerySupervisor

__all__ = ["QuerySupervisor", "Shell", "is_raw_sql", "is_write_operation"]
