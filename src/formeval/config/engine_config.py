# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the engine configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".formeval.yaml"

DEFAULT_CONFIG_TEXT = (
    "# formeval engine configuration\n"
    "\n"
    "# Upper bound on recomputation passes (defaults to derived fields + 1).\n"
    "# max-passes: 10\n"
    "\n"
    "# Fixed reference date for 'age' derived fields (defaults to today).\n"
    "# today: 2026-01-01\n"
    "\n"
    "log-level: WARNING\n"
)


class EngineConfigError(Exception):
    """Raised when an engine configuration file is invalid or cannot be loaded."""


@dataclass
class EngineConfig:
    """Settings applied when the engine runs outside a caller-owned session.

    Attributes:
        max_passes: Upper bound on recomputation passes, or None for the
            default of derived field count plus one.
        today: Reference date for ``age`` calculations, or None for the
            current date.
        log_level: Name of the logging level used by the CLI.
    """

    max_passes: int | None = None
    today: date | None = None
    log_level: str = "WARNING"


def load_engine_config(path: Path) -> EngineConfig:
    """Load and parse an engine configuration file.

    Args:
        path: Path to the ``.formeval.yaml`` file.

    Returns:
        An EngineConfig instance populated from the file.

    Raises:
        EngineConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise EngineConfigError(f"Engine config file not found: {path}") from None
    except OSError as exc:
        raise EngineConfigError(f"Cannot read engine config file: {exc}") from exc

    return _parse_engine_config(text, source_label=str(path))


def find_engine_config(directory: Path) -> EngineConfig:
    """Load ``.formeval.yaml`` from *directory*, or return defaults if it does not exist.

    Raises:
        EngineConfigError: If the file exists but is invalid.
    """
    path = directory / CONFIG_FILE_NAME
    if not path.exists():
        return EngineConfig()
    return load_engine_config(path)


# ################
# Implementation
# ################

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_engine_config(text: str, source_label: str = "<string>") -> EngineConfig:
    """Parse engine config YAML text into an EngineConfig.

    An empty document yields the defaults.

    Raises:
        EngineConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise EngineConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return EngineConfig()
    if not isinstance(data, dict):
        raise EngineConfigError(f"{source_label}: engine config must be a YAML mapping")

    unknown = sorted(set(data) - {"max-passes", "today", "log-level"})
    if unknown:
        raise EngineConfigError(f"{source_label}: unknown field(s): {', '.join(map(str, unknown))}")

    return EngineConfig(
        max_passes=_parse_max_passes(data.get("max-passes"), source_label),
        today=_parse_today(data.get("today"), source_label),
        log_level=_parse_log_level(data.get("log-level", "WARNING"), source_label),
    )


def _parse_max_passes(value: object, source_label: str) -> int | None:
    """Validate the optional positive ``max-passes`` integer."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise EngineConfigError(f"{source_label}: 'max-passes' must be a positive integer")
    return value


def _parse_today(value: object, source_label: str) -> date | None:
    """Validate the optional ``today`` date (YAML date or ISO string)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise EngineConfigError(f"{source_label}: 'today' must be a date in YYYY-MM-DD format")


def _parse_log_level(value: object, source_label: str) -> str:
    """Validate the ``log-level`` name against the supported logging levels."""
    if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
        raise EngineConfigError(f"{source_label}: 'log-level' must be one of {', '.join(_LOG_LEVELS)}")
    return value.upper()
