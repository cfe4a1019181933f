"""Exception hierarchy for psqlm."""

from __future__ import annotations

from typing import Optional


class PsqlmError(Exception):
    """Base class for all psqlm errors."""


class ConfigError(PsqlmError):
    """API credential missing, or config file unreadable."""


class TransportError(PsqlmError):
    """HTTP request to the assistant API failed."""


class APIStatusError(TransportError):
    """Assistant API answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Assistant API error ({status_code}): {body}")


class AssistantError(PsqlmError):
    """Assistant produced no usable SQL."""


class DatabaseError(PsqlmError):
    """psql could not be run, or a required query failed."""

    def __init__(self, message: str, stderr: Optional[str] = None):
        self.stderr = stderr
        super().__init__(message)

