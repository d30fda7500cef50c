# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reading and writing schema and value records."""

from formeval.io.records import (
    SUPPORTED_SUFFIXES,
    SchemaLoadError,
    dump_schema,
    dump_values,
    load_schema,
    load_values,
    parse_schema,
    parse_values,
)

__all__ = [
    "SUPPORTED_SUFFIXES",
    "SchemaLoadError",
    "parse_schema",
    "parse_values",
    "load_schema",
    "load_values",
    "dump_schema",
    "dump_values",
]
