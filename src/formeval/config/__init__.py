# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Engine configuration for formeval."""

from formeval.config.engine_config import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    EngineConfig,
    EngineConfigError,
    find_engine_config,
    load_engine_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG_TEXT",
    "EngineConfig",
    "EngineConfigError",
    "find_engine_config",
    "load_engine_config",
]
