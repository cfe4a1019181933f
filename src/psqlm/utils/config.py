"""Configuration management for psqlm."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import click
import tomli_w

from psqlm.errors import ConfigError
from psqlm.utils.logging import get_logger
from psqlm.utils.paths import get_config_path

logger = get_logger(__name__)

API_KEY_ENV = "ANTHROPIC_API_KEY"


class ExecutionMode(str, Enum):
    """What happens to SQL proposed by the assistant."""

    AUTO = "auto"
    CONFIRM = "confirm"
    SHOW = "show"

    @classmethod
    def parse(cls, value: str) -> ExecutionMode:
        """Parse a mode name, case-insensitively.

        Raises:
            ValueError: If the name is not a known mode
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown execution mode: {value!r} (use auto, confirm, or show)"
            ) from None

    @property
    def description(self) -> str:
        return {
            ExecutionMode.AUTO: "run immediately",
            ExecutionMode.CONFIRM: "ask before running",
            ExecutionMode.SHOW: "display SQL only",
        }[self]


@dataclass
class Config:
    """Runtime configuration.

    The execution mode may change during a session (``\\mode`` or the
    "Always run" menu choice); such changes are not written back to disk.
    """

    api_key: str
    execution_mode: ExecutionMode = ExecutionMode.CONFIRM

    def __repr__(self) -> str:
        # Never echo the credential
        return f"Config(execution_mode={self.execution_mode.value})"


def read_config_file(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Read the TOML config file.

    Args:
        path: Config file path (defaults to the user config location)

    Returns:
        Parsed table with ``api_key`` (optional) and ``execution_mode``

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file is not valid TOML or names an unknown mode
    """
    path = Path(path) if path else get_config_path()

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    mode = data.get("execution_mode", ExecutionMode.CONFIRM.value)
    try:
        data["execution_mode"] = ExecutionMode.parse(str(mode))
    except ValueError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    logger.debug(f"Loaded config from {path}")
    return data


def save_config_file(
    api_key: str,
    execution_mode: ExecutionMode = ExecutionMode.CONFIRM,
    path: Optional[str | Path] = None,
) -> Path:
    """Write the TOML config file, creating parent directories.

    Returns:
        Path that was written
    """
    path = Path(path) if path else get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "wb") as f:
        tomli_w.dump({"api_key": api_key, "execution_mode": execution_mode.value}, f)

    logger.info(f"Saved config to {path}")
    return path


def _strip_whitespace(value: str) -> str:
    return "".join(ch for ch in value if not ch.isspace())


def load_or_create(
    env: Optional[Mapping[str, str]] = None,
    config_path: Optional[str | Path] = None,
    prompt: Callable[[str], str] = input,
    confirm: Optional[Callable[[str], bool]] = None,
) -> Config:
    """Resolve the API credential and execution mode.

    Resolution order:
    1. ANTHROPIC_API_KEY environment variable (all whitespace removed)
    2. ``api_key`` in the config file
    3. Interactive prompt, optionally saving the key to the config file

    Args:
        env: Environment mapping (defaults to os.environ)
        config_path: Config file path (defaults to the user config location)
        prompt: Line reader used for the interactive fallback
        confirm: Yes/no question used before saving (defaults to click.confirm)

    Returns:
        Config instance

    Raises:
        ConfigError: If no credential can be obtained
    """
    env = os.environ if env is None else env
    confirm = confirm or (lambda message: click.confirm(message, default=False))
    path = Path(config_path) if config_path else get_config_path()

    env_key = env.get(API_KEY_ENV)
    if env_key is not None:
        api_key = _strip_whitespace(env_key)
        mode = ExecutionMode.CONFIRM
        try:
            mode = read_config_file(path)["execution_mode"]
        except FileNotFoundError:
            pass
        except (OSError, ConfigError) as e:
            logger.warning(f"Ignoring config file: {e}")
        if api_key:
            logger.debug(f"Using API key from {API_KEY_ENV}")
            return Config(api_key=api_key, execution_mode=mode)
        logger.warning(f"{API_KEY_ENV} is set but empty")

    try:
        data = read_config_file(path)
    except FileNotFoundError:
        data = {}
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    api_key = data.get("api_key")
    if api_key:
        return Config(api_key=str(api_key), execution_mode=data["execution_mode"])

    api_key = prompt("Enter your Anthropic API key: ").strip()
    if not api_key:
        raise ConfigError("API key cannot be empty")

    if confirm("Save API key to config file?"):
        try:
            saved = save_config_file(api_key, path=path)
        except OSError as e:
            raise ConfigError(f"Failed to write config file {path}: {e}") from e
        click.echo(f"Saved to {saved}\n")

    return Config(api_key=api_key)
