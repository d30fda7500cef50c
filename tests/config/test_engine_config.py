# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the engine configuration module."""

from datetime import date
from pathlib import Path

import pytest

from formeval.config import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    EngineConfig,
    EngineConfigError,
    find_engine_config,
    load_engine_config,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write an engine config file and return its path."""
    config_file = tmp_path / CONFIG_FILE_NAME
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_full_config(tmp_path: Path) -> None:
    """All supported keys are parsed into an EngineConfig."""
    content = """\
max-passes: 5
today: 2026-03-01
log-level: debug
"""
    config = load_engine_config(_write_config(tmp_path, content))

    assert config == EngineConfig(max_passes=5, today=date(2026, 3, 1), log_level="DEBUG")


def test_empty_config_yields_defaults(tmp_path: Path) -> None:
    """An empty file produces the default configuration."""
    config = load_engine_config(_write_config(tmp_path, ""))

    assert config == EngineConfig()
    assert config.max_passes is None
    assert config.today is None
    assert config.log_level == "WARNING"


def test_quoted_today_string(tmp_path: Path) -> None:
    """A quoted ISO date string is accepted for 'today'."""
    config = load_engine_config(_write_config(tmp_path, "today: '2024-02-29'\n"))

    assert config.today == date(2024, 2, 29)


def test_default_config_text_parses(tmp_path: Path) -> None:
    """The text written by init-config is itself a valid config."""
    config = load_engine_config(_write_config(tmp_path, DEFAULT_CONFIG_TEXT))

    assert config == EngineConfig()


def test_find_config_without_file(tmp_path: Path) -> None:
    """find_engine_config returns defaults when no config file exists."""
    assert find_engine_config(tmp_path) == EngineConfig()


def test_find_config_with_file(tmp_path: Path) -> None:
    """find_engine_config loads the config file from the directory."""
    _write_config(tmp_path, "max-passes: 2\n")

    assert find_engine_config(tmp_path).max_passes == 2


# ###############
# Error Cases
# ###############


def test_missing_file_raises(tmp_path: Path) -> None:
    """Loading a non-existent file raises EngineConfigError."""
    with pytest.raises(EngineConfigError, match="Engine config file not found"):
        load_engine_config(tmp_path / CONFIG_FILE_NAME)


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    """Malformed YAML raises EngineConfigError."""
    with pytest.raises(EngineConfigError, match="Invalid YAML"):
        load_engine_config(_write_config(tmp_path, "max-passes: [1\n"))


def test_non_mapping_raises(tmp_path: Path) -> None:
    """A top-level list is not a valid config."""
    with pytest.raises(EngineConfigError, match="must be a YAML mapping"):
        load_engine_config(_write_config(tmp_path, "- 1\n- 2\n"))


def test_unknown_key_raises(tmp_path: Path) -> None:
    """Keys outside the supported set are rejected."""
    with pytest.raises(EngineConfigError, match="unknown field\\(s\\): passes"):
        load_engine_config(_write_config(tmp_path, "passes: 3\n"))


@pytest.mark.parametrize("value", ["0", "-1", "1.5", "true", "many"])
def test_invalid_max_passes_raises(tmp_path: Path, value: str) -> None:
    """max-passes must be a positive integer."""
    with pytest.raises(EngineConfigError, match="'max-passes' must be a positive integer"):
        load_engine_config(_write_config(tmp_path, f"max-passes: {value}\n"))


def test_invalid_today_raises(tmp_path: Path) -> None:
    """A non-ISO date string for 'today' is rejected."""
    with pytest.raises(EngineConfigError, match="'today' must be a date"):
        load_engine_config(_write_config(tmp_path, "today: 01/03/2026\n"))


def test_invalid_log_level_raises(tmp_path: Path) -> None:
    """Only the supported logging level names are accepted."""
    with pytest.raises(EngineConfigError, match="'log-level' must be one of"):
        load_engine_config(_write_config(tmp_path, "log-level: VERBOSE\n"))
