"""CLI entry point for psqlm."""

from __future__ import annotations

import asyncio

import click

from psqlm import __version__
from psqlm.agent.client import AssistantClient
from psqlm.cli.decorators import handle_errors
from psqlm.connectors.psql_connector import PsqlConnector
from psqlm.repl.session import default_shell
from psqlm.schema.introspector import SchemaIntrospector
from psqlm.utils.config import load_or_create
from psqlm.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


# -h is the host, as in psql, so help is --help only
@click.command(context_settings={"help_option_names": ["--help"]})
@click.version_option(version=__version__, prog_name="psqlm")
@click.option("-h", "--host", default="localhost", show_default=True, help="Database server host")
@click.option("-p", "--port", default="5432", show_default=True, help="Database server port")
@click.option("-U", "--username", "user", required=True, help="Database user name")
@click.option("-d", "--dbname", "database", required=True, help="Database name to connect to")
@click.option("-W", "--password", default=None, help="Database password (sent via PGPASSWORD)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
)
@handle_errors
def cli(host, port, user, database, password, log_level):
    """psqlm - A natural language interface to PostgreSQL.

    \b
    Examples:
        # Connect and start asking questions
        psqlm -U postgres -d shop

        # Remote server with a password
        psqlm -h db.internal -p 6432 -U analyst -d warehouse -W secret
    """
    setup_logging(level=log_level)

    config = load_or_create()

    connector = PsqlConnector(
        host=host, port=port, user=user, database=database, password=password
    )

    click.echo(f"Connecting to {database}...")
    schema = SchemaIntrospector(connector).introspect()
    click.echo(f"Schema loaded ({len(schema)} tables)\n")

    assistant = AssistantClient(api_key=config.api_key)
    shell = default_shell(connector, assistant, schema, config)

    asyncio.run(shell.run())


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
