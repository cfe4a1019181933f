"""Tests for the command-line entry point."""

import pytest
from click.testing import CliRunner

from psqlm.cli import cli_main
from psqlm.errors import ConfigError, DatabaseError
from psqlm.schema.types import Column, Schema, Table
from psqlm.utils.config import Config


class FakeShell:
    def __init__(self):
        self.ran = False

    async def run(self):
        self.ran = True


@pytest.fixture
def wired(monkeypatch):
    """Replace config loading, introspection and the shell."""
    state = {"shell": FakeShell(), "connector": None}

    schema = Schema()
    schema.add_table(Table("public.users", columns=[Column("id", "integer", False)]))

    class FakeIntrospector:
        def __init__(self, connector):
            state["connector"] = connector

        def introspect(self):
            return schema

    def fake_default_shell(connector, assistant, schema, config):
        state["assistant"] = assistant
        return state["shell"]

    monkeypatch.setattr(cli_main, "load_or_create", lambda: Config(api_key="sk-test"))
    monkeypatch.setattr(cli_main, "SchemaIntrospector", FakeIntrospector)
    monkeypatch.setattr(cli_main, "default_shell", fake_default_shell)
    return state


def test_help_uses_long_flag_only():
    result = CliRunner().invoke(cli_main.cli, ["--help"])

    assert result.exit_code == 0
    assert "-h, --host" in result.output
    assert "-U, --username" in result.output


def test_required_options():
    result = CliRunner().invoke(cli_main.cli, ["-d", "shop"])
    assert result.exit_code != 0
    assert "--username" in result.output


def test_startup_connects_and_runs_shell(wired):
    result = CliRunner().invoke(
        cli_main.cli, ["-h", "db", "-p", "6432", "-U", "alice", "-d", "shop", "-W", "pw"]
    )

    assert result.exit_code == 0, result.output
    assert "Connecting to shop..." in result.output
    assert "Schema loaded (1 tables)" in result.output
    assert wired["shell"].ran is True

    connector = wired["connector"]
    assert connector.host == "db"
    assert connector.port == "6432"
    assert connector.user == "alice"
    assert connector.password == "pw"
    assert wired["assistant"].api_key == "sk-test"


def test_defaults_for_host_and_port(wired):
    result = CliRunner().invoke(cli_main.cli, ["-U", "alice", "-d", "shop"])

    assert result.exit_code == 0, result.output
    assert wired["connector"].host == "localhost"
    assert wired["connector"].port == "5432"
    assert wired["connector"].password is None


def test_introspection_failure_exits_non_zero(wired, monkeypatch):
    class Failing:
        def __init__(self, connector):
            pass

        def introspect(self):
            raise DatabaseError("psql query failed: password authentication failed")

    monkeypatch.setattr(cli_main, "SchemaIntrospector", Failing)

    result = CliRunner().invoke(cli_main.cli, ["-U", "alice", "-d", "shop"])

    assert result.exit_code != 0
    assert "Database error" in result.output
    assert wired["shell"].ran is False


def test_config_failure_exits_non_zero(wired, monkeypatch):
    def broken():
        raise ConfigError("API key cannot be empty")

    monkeypatch.setattr(cli_main, "load_or_create", broken)

    result = CliRunner().invoke(cli_main.cli, ["-U", "alice", "-d", "shop"])

    assert result.exit_code != 0
    assert "Configuration error: API key cannot be empty" in result.output
