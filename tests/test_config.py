"""Tests for credential and execution-mode resolution."""

import pytest

from psqlm.errors import ConfigError
from psqlm.utils.config import (
    Config,
    ExecutionMode,
    load_or_create,
    read_config_file,
    save_config_file,
)


def no_prompt(message):
    raise AssertionError(f"unexpected prompt: {message}")


def test_env_key_whitespace_is_stripped(tmp_path):
    config = load_or_create(
        env={"ANTHROPIC_API_KEY": "  sk-abc \n"},
        config_path=tmp_path / "missing.toml",
        prompt=no_prompt,
    )
    assert config.api_key == "sk-abc"
    assert config.execution_mode is ExecutionMode.CONFIRM


def test_env_key_keeps_mode_from_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('api_key = "sk-file"\nexecution_mode = "auto"\n')

    config = load_or_create(env={"ANTHROPIC_API_KEY": "sk-env"}, config_path=path, prompt=no_prompt)

    assert config.api_key == "sk-env"
    assert config.execution_mode is ExecutionMode.AUTO


def test_env_key_with_broken_file_is_tolerated(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("this is = = not toml")

    config = load_or_create(env={"ANTHROPIC_API_KEY": "sk-env"}, config_path=path, prompt=no_prompt)

    assert config.api_key == "sk-env"


def test_file_key_used_when_env_missing(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('api_key = "sk-file"\nexecution_mode = "show"\n')

    config = load_or_create(env={}, config_path=path, prompt=no_prompt)

    assert config.api_key == "sk-file"
    assert config.execution_mode is ExecutionMode.SHOW


def test_invalid_file_without_env_is_fatal(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('execution_mode = "sometimes"\n')

    with pytest.raises(ConfigError):
        load_or_create(env={}, config_path=path, prompt=no_prompt)


def test_prompt_and_save(tmp_path):
    path = tmp_path / "psqlm" / "config.toml"

    config = load_or_create(
        env={},
        config_path=path,
        prompt=lambda message: "  sk-typed  ",
        confirm=lambda message: True,
    )

    assert config.api_key == "sk-typed"
    saved = read_config_file(path)
    assert saved["api_key"] == "sk-typed"
    assert saved["execution_mode"] is ExecutionMode.CONFIRM


def test_prompt_without_saving(tmp_path):
    path = tmp_path / "config.toml"

    load_or_create(
        env={}, config_path=path, prompt=lambda m: "sk-typed", confirm=lambda m: False
    )

    assert not path.exists()


def test_empty_prompt_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_or_create(env={}, config_path=tmp_path / "c.toml", prompt=lambda m: "   ")


def test_save_round_trip(tmp_path):
    path = save_config_file("sk-x", ExecutionMode.SHOW, path=tmp_path / "c.toml")
    data = read_config_file(path)
    assert data == {"api_key": "sk-x", "execution_mode": ExecutionMode.SHOW}


@pytest.mark.parametrize("text,mode", [("auto", ExecutionMode.AUTO), (" Confirm ", ExecutionMode.CONFIRM), ("SHOW", ExecutionMode.SHOW)])
def test_execution_mode_parse(text, mode):
    assert ExecutionMode.parse(text) is mode


def test_execution_mode_parse_rejects_unknown():
    with pytest.raises(ValueError):
        ExecutionMode.parse("yolo")


def test_config_repr_hides_key():
    assert "sk-secret" not in repr(Config(api_key="sk-secret"))
