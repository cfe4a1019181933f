"""Error handling decorators for CLI commands."""

from __future__ import annotations

import signal
import sys
from functools import wraps

import click

from psqlm.errors import ConfigError, DatabaseError, PsqlmError, TransportError
from psqlm.utils.logging import get_logger

logger = get_logger(__name__)

# Handle SIGPIPE gracefully (prevent BrokenPipeError when piping to head, etc.)
try:
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)
except AttributeError:
    # Windows doesn't have SIGPIPE
    pass


def handle_errors(f):
    """Decorator to report startup errors and abort with a non-zero exit.

    Example:
        @click.command()
        @handle_errors
        def my_command():
            # Your command logic
            pass
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except click.Abort:
            raise
        except BrokenPipeError:
            devnull = open("/dev/null", "w")
            sys.stdout = devnull
            sys.stderr = devnull
            sys.exit(0)
        except ConfigError as e:
            click.echo(f"❌ Configuration error: {e}", err=True)
            raise click.Abort()
        except DatabaseError as e:
            click.echo(f"❌ Database error: {e}", err=True)
            raise click.Abort()
        except TransportError as e:
            click.echo(f"❌ Assistant API error: {e}", err=True)
            raise click.Abort()
        except PsqlmError as e:
            click.echo(f"❌ {e}", err=True)
            raise click.Abort()
        except KeyboardInterrupt:
            click.echo("", err=True)
            raise click.Abort()
        except Exception as e:
            click.echo(f"❌ Unexpected error: {e}", err=True)
            logger.exception("Unexpected error in command")
            raise click.Abort()

    return wrapper
