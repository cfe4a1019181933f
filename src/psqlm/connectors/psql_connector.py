"""Database connector driving the psql command-line client."""

from __future__ import annotations

import os
import subprocess
from typing import Callable, Dict, List, Optional

from psqlm.connectors.base import BaseConnector, ExecutionResult
from psqlm.errors import DatabaseError
from psqlm.utils.logging import get_logger

logger = get_logger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


class PsqlConnector(BaseConnector):
    """Execute SQL through short-lived ``psql`` subprocesses."""

    def __init__(
        self,
        host: str = "localhost",
        port: str = "5432",
        user: str = "",
        database: str = "",
        password: Optional[str] = None,
        psql_path: str = "psql",
        runner: Optional[Runner] = None,
    ):
        """Initialize psql connector.

        Args:
            host: Server host
            port: Server port
            user: Role to connect as
            database: Database name
            password: Optional password, passed through PGPASSWORD
            psql_path: psql executable
            runner: subprocess.run replacement (for testing)

        Example:
            >>> connector = PsqlConnector(user="postgres", database="shop")
            >>> connector.query("SELECT 1")
            '1\\n'
        """
        super().__init__(host=host, port=port, user=user, database=database)

        self.host = host
        self.port = str(port)
        self.user = user
        self.database = database
        self.password = password
        self.psql_path = psql_path
        self._run = runner or subprocess.run

    def base_command(self) -> List[str]:
        return [
            self.psql_path,
            "-h",
            self.host,
            "-p",
            self.port,
            "-U",
            self.user,
            "-d",
            self.database,
        ]

    def _env(self) -> Optional[Dict[str, str]]:
        if self.password is None:
            return None
        env = dict(os.environ)
        env["PGPASSWORD"] = self.password
        return env

    def _invoke(self, args: List[str]) -> ExecutionResult:
        cmd = self.base_command() + args
        self.logger.debug(f"Running: {' '.join(cmd)}")

        try:
            proc = self._run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                env=self._env(),
            )
        except FileNotFoundError as e:
            raise DatabaseError(f"Failed to execute psql: {e}") from e

        result = ExecutionResult(
            success=proc.returncode == 0,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        if not result.success:
            self.logger.debug(f"psql exited with {proc.returncode}")
        return result

    def query(self, sql: str) -> str:
        """Run a query with ``-t -A`` and return its raw output.

        Raises:
            DatabaseError: If psql exits non-zero
        """
        result = self._invoke(["-t", "-A", "-c", sql])
        if not result.success:
            raise DatabaseError(f"psql query failed: {result.stderr}", result.stderr)
        return result.stdout

    def execute_capture(self, sql: str) -> ExecutionResult:
        return self._invoke(["-c", sql])

    def execute_write(self, sql: str, commit: bool) -> ExecutionResult:
        transaction_end = "COMMIT" if commit else "ROLLBACK"
        return self._invoke(["-c", "BEGIN", "-c", sql, "-c", transaction_end])

    def __repr__(self) -> str:
        return (
            f"PsqlConnector({self.user}@{self.host}:{self.port}/{self.database})"
        )
